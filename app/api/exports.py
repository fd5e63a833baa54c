"""Export router (Admin)."""
import logging
from datetime import datetime
from typing import Annotated
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.export_service import ExportService, ExportOptions
from app.api.dependencies import AdminUser

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/exports", tags=["Admin - Exports"])


@router.get("/surveys/{survey_id}/analysis/csv")
def export_survey_analysis_csv(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
    include_question_analysis: bool = Query(True, alias="includeQuestionAnalysis"),
    include_respondent_data: bool = Query(True, alias="includeRespondentData"),
    include_raw_responses: bool = Query(False, alias="includeRawResponses"),
):
    """
    Download the survey analysis report as CSV (Admin only).
    """
    logger.info("Starting CSV export for survey %s", survey_id)

    options = ExportOptions(
        include_question_analysis=include_question_analysis,
        include_respondent_data=include_respondent_data,
        include_raw_responses=include_raw_responses,
    )
    csv_data = ExportService(db).export_survey_analysis_csv(survey_id, options)

    logger.info("CSV export for survey %s done, %d bytes", survey_id, len(csv_data))

    filename = f"survey_analysis_{survey_id}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"
    return Response(
        content=csv_data,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
