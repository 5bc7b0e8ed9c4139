"""Pydantic schemas: re-exported for convenience."""

from lms.schemas.common import ApiResponse, CamelModel, PagedResponse  # noqa: F401
from lms.schemas.user import (  # noqa: F401
    AuthResponse,
    LoginRequest,
    RegistrationRequest,
    UserRead,
)
from lms.schemas.document import DocumentRead, DocumentUpdate  # noqa: F401
from lms.schemas.learning_item import (  # noqa: F401
    LearningItemCreate,
    LearningItemRead,
    LearningItemType,
    LearningItemUpdate,
)
from lms.schemas.week import WeekCreate, WeekRead, WeekUpdate  # noqa: F401
from lms.schemas.course import (  # noqa: F401
    CourseCreate,
    CourseDetailRead,
    CourseRead,
    EnrollmentRequest,
)
from lms.schemas.quiz_bank import QuizBankCreate, QuizBankRead, QuizBankUpdate  # noqa: F401
from lms.schemas.question import QuestionCreate, QuestionRead, QuestionUpdate  # noqa: F401
from lms.schemas.quiz import (  # noqa: F401
    AnswerSubmission,
    QuizAttemptRead,
    QuizResultRead,
    StudentResponseRead,
)
