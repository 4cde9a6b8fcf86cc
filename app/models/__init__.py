# every model has to be imported before the mappers are configured
from app.models.user import User
from app.models.week import Week
from app.models.schedule_entry import ScheduleEntry
