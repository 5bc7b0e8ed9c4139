"""API route package: imports all routers for main.py."""

from lms.api.health import router as health_router  # noqa: F401
from lms.api.users import router as users_router  # noqa: F401
from lms.api.courses import router as courses_router  # noqa: F401
from lms.api.weeks import router as weeks_router  # noqa: F401
from lms.api.learning_items import router as learning_items_router  # noqa: F401
from lms.api.documents import router as documents_router  # noqa: F401
from lms.api.quiz_banks import router as quiz_banks_router  # noqa: F401
from lms.api.questions import router as questions_router  # noqa: F401
from lms.api.quizzes import router as quizzes_router  # noqa: F401
from lms.api.enrollments import router as enrollments_router  # noqa: F401
from lms.api.files import router as files_router  # noqa: F401
