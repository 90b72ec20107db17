from app.schemas.auth import UserResponse


class AdminUserResponse(UserResponse):
    job_count: int = 0
