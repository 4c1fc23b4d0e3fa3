import re
from datetime import datetime
from typing import Optional, List, Any, Callable

from email_validator import validate_email, EmailNotValidError

from .errors import ValidationException, ValidationError

MAX_MESSAGE_LENGTH = 2000
MAX_EMOJI_LENGTH = 16
MAX_ROOM_DURATION_HOURS = 12


class Validator:
    """입력 검증을 위한 유틸리티 클래스"""

    @staticmethod
    def validate_required(value: Any, field_name: str) -> Any:
        """필수 필드 검증"""
        if value is None or (isinstance(value, str) and value.strip() == ""):
            raise ValidationException(
                f"{field_name} is required",
                validation_errors=[
                    ValidationError(field=field_name, message="This field is required", value=value)
                ]
            )
        return value

    @staticmethod
    def validate_email_format(email: str, field_name: str = "email") -> str:
        """이메일 형식 검증"""
        try:
            result = validate_email(email, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValidationException(
                "Invalid email format",
                validation_errors=[
                    ValidationError(field=field_name, message=str(e), value=email)
                ]
            )
        return result.normalized

    @staticmethod
    def validate_password_strength(password: str, field_name: str = "password") -> str:
        """비밀번호 강도 검증 (8-64자, 영문자와 숫자 포함)"""
        errors = []

        if len(password) < 8:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Password must be at least 8 characters long",
                    value=len(password)
                )
            )
        elif len(password) > 64:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Password must be no more than 64 characters long",
                    value=len(password)
                )
            )

        if not re.search(r'[a-zA-Z]', password):
            errors.append(
                ValidationError(field=field_name, message="Password must contain at least one letter")
            )

        if not re.search(r'\d', password):
            errors.append(
                ValidationError(field=field_name, message="Password must contain at least one digit")
            )

        if errors:
            raise ValidationException(
                "Password does not meet security requirements",
                validation_errors=errors
            )

        return password

    @staticmethod
    def validate_username(username: str, field_name: str = "username") -> str:
        """사용자명 검증"""
        errors = []

        if len(username) < 3:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Username must be at least 3 characters long",
                    value=len(username)
                )
            )
        elif len(username) > 30:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Username must be no more than 30 characters long",
                    value=len(username)
                )
            )

        # 영문자, 숫자, 언더스코어, 하이픈만 허용
        if not re.match(r'^[a-zA-Z0-9_-]+$', username):
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Username can only contain letters, numbers, underscores, and hyphens"
                )
            )

        if errors:
            raise ValidationException(
                "Username validation failed",
                validation_errors=errors
            )

        return username

    @staticmethod
    def validate_message_text(text: str, field_name: str = "text") -> str:
        """메시지 내용 검증"""
        errors = []

        if not text or text.strip() == "":
            errors.append(
                ValidationError(field=field_name, message="Message text cannot be empty")
            )
        elif len(text) > MAX_MESSAGE_LENGTH:
            errors.append(
                ValidationError(
                    field=field_name,
                    message=f"Message text must be no more than {MAX_MESSAGE_LENGTH} characters",
                    value=len(text)
                )
            )

        # 제어 문자 검증
        if text and re.search(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', text):
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Message text contains invalid control characters"
                )
            )

        if errors:
            raise ValidationException(
                "Message validation failed",
                validation_errors=errors
            )

        return text.strip()

    @staticmethod
    def validate_emoji(emoji: str, field_name: str = "emoji") -> str:
        """이모지 반응 검증 (공백 불가, 짧은 문자열)"""
        if not emoji or emoji.strip() == "" or len(emoji) > MAX_EMOJI_LENGTH or re.search(r'\s', emoji):
            raise ValidationException(
                "Invalid emoji",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message=f"Emoji must be a non-blank value of at most {MAX_EMOJI_LENGTH} characters",
                        value=emoji
                    )
                ]
            )
        return emoji

    @staticmethod
    def validate_room_schedule(
        starts_at: datetime,
        ends_at: datetime,
        now: Optional[datetime] = None
    ) -> tuple:
        """채팅방 일정 검증 (종료 시간이 시작 이후, 최대 길이 제한, 이미 끝난 일정 불가)"""
        now = now or datetime.utcnow()
        errors = []

        if ends_at <= starts_at:
            errors.append(
                ValidationError(field="ends_at", message="End time must be after start time")
            )
        elif (ends_at - starts_at).total_seconds() > MAX_ROOM_DURATION_HOURS * 3600:
            errors.append(
                ValidationError(
                    field="ends_at",
                    message=f"A room can last at most {MAX_ROOM_DURATION_HOURS} hours"
                )
            )

        if ends_at <= now:
            errors.append(
                ValidationError(field="ends_at", message="End time must be in the future")
            )

        if errors:
            raise ValidationException(
                "Room schedule validation failed",
                validation_errors=errors
            )

        return starts_at, ends_at

    @staticmethod
    def validate_multiple_fields(validations: List[Callable[[], Any]]) -> List[Any]:
        """여러 필드 동시 검증"""
        errors = []
        results = []

        for validation_func in validations:
            try:
                results.append(validation_func())
            except ValidationException as e:
                errors.extend(e.validation_errors)

        if errors:
            raise ValidationException(
                "Multiple validation errors",
                validation_errors=errors
            )

        return results


# 편의 함수들
def validate_user_registration(email: str, username: str, password: str):
    """사용자 등록 데이터 전체 검증"""
    validator = Validator()

    validations = [
        lambda: validator.validate_email_format(email),
        lambda: validator.validate_username(username),
        lambda: validator.validate_password_strength(password),
    ]

    return validator.validate_multiple_fields(validations)


def validate_user_login(email: str, password: str):
    """사용자 로그인 데이터 검증"""
    validator = Validator()

    validations = [
        lambda: validator.validate_required(email, "email"),
        lambda: validator.validate_required(password, "password"),
    ]

    return validator.validate_multiple_fields(validations)
