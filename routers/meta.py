from fastapi import APIRouter

from config.constants import GRADE_TYPE_LABELS
from config.settings import settings

router = APIRouter(prefix="/meta", tags=["Meta"])

@router.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@router.get("/grading")
def grading():
    # 프론트 카드/배지 표시 기준
    return {
        "success": True,
        "data": {
            "scale": settings.GRADE_SCALE,
            "passing_average": settings.PASSING_AVERAGE,
            "grade_types": GRADE_TYPE_LABELS,
            "popular_subjects_limit": settings.POPULAR_SUBJECTS_LIMIT,
        },
    }
