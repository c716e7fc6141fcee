from app.models.classroom import Classroom, RoomType  # noqa: F401
from app.models.faculty import Faculty  # noqa: F401
from app.models.subject import ProgramLevel, Subject  # noqa: F401
from app.models.timeslot import Timeslot  # noqa: F401
from app.models.timetable import Timetable, TimetableStatus  # noqa: F401
