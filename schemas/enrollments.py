from pydantic import BaseModel


# ✅ 수강 신청용 (POST 요청, 학생 본인)
class EnrollmentCreate(BaseModel):
    group_id: int                                    # 신청할 그룹 ID
