"""Domain modules package."""

from app.modules.audit import models as audit_models  # noqa: F401
from app.modules.courses import models as courses_models  # noqa: F401
from app.modules.enrollments import models as enrollments_models  # noqa: F401
from app.modules.notifications import models as notifications_models  # noqa: F401
from app.modules.orders import models as orders_models  # noqa: F401
