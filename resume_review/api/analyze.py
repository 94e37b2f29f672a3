from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from resume_review.schemas.analysis import (
    AnalyzeResponse,
    GenerateImprovedRequest,
    GenerateImprovedResponse,
)
from resume_review.services import container
from resume_review.services.document_extractor import UploadedDocument
from resume_review.utils.exceptions import ResumeReviewError
from resume_review.utils.logger import get_logger

logger = get_logger(__name__)

# Resume analysis endpoints
router = APIRouter(tags=["Resume Analysis"])


def _to_http_exception(error: ResumeReviewError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(file: Optional[UploadFile] = File(None)):
    """
    Upload a resume and get an AI critique.

    Extracts text from PDF or DOCX files and sends it to Gemini for analysis.
    """
    services = container.services
    try:
        upload = None
        if file is not None and file.filename:
            logger.info(f"[API] Received resume upload: {file.filename} ({file.content_type})")
            # Read one byte past the limit so oversized files are detected without reading them fully
            max_bytes = services.config.upload.max_upload_bytes
            content = await file.read(max_bytes + 1)
            upload = UploadedDocument(
                content=content,
                content_type=file.content_type or "",
                filename=file.filename,
            )

        outcome = await services.analysis_service.analyze(upload)
        logger.info(f"[API] ✅ Resume analyzed: {len(outcome.text)} characters extracted")
        return AnalyzeResponse(text=outcome.text, analysis=outcome.analysis)

    except ResumeReviewError as e:
        logger.warning(f"[API] ⚠️ Analyze rejected ({type(e).__name__}): {e.message}")
        raise _to_http_exception(e)
    except Exception as e:
        logger.error(f"[API] Failed to analyze resume: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to analyze the resume. Please try again later."
        )
    finally:
        if file is not None:
            await file.close()


@router.post("/generate-improved", response_model=GenerateImprovedResponse)
async def generate_improved(body: GenerateImprovedRequest):
    """
    Generate a complete rewritten resume from the original text and the
    suggestions returned by /analyze.
    """
    services = container.services
    try:
        outcome = await services.analysis_service.generate_improved(
            body.originalResume, body.suggestions
        )
        logger.info(f"[API] ✅ Improved resume generated: {len(outcome.improved_resume)} characters")
        return GenerateImprovedResponse(improvedResume=outcome.improved_resume)

    except ResumeReviewError as e:
        logger.warning(f"[API] ⚠️ Generate-improved rejected ({type(e).__name__}): {e.message}")
        raise _to_http_exception(e)
    except Exception as e:
        logger.error(f"[API] Failed to generate improved resume: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate the improved resume. Please try again later."
        )
