# academy/db/base.py
# Import every model so Base.metadata is complete for create_all / alembic.
from academy.db.base_class import Base  # noqa

from academy.models.allowed_student import AllowedStudent  # noqa
from academy.models.user import User  # noqa
from academy.models.schedule import Schedule  # noqa
from academy.models.reservation import Reservation  # noqa
