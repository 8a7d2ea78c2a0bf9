from typing import List, Optional

from bson import ObjectId
from pydantic import Field

from gamification.core.documents import Document

# ==================== DATABASE MODELS ====================

class Course(Document):
    title: str
    objective: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[str] = None
    lesson_format: Optional[str] = Field(None, alias="lessonFormat")
    instructor_id: ObjectId = Field(..., alias="instructorId")  # set once, never updated
    learner_ids: List[ObjectId] = Field(default_factory=list, alias="learnerIds")


class CourseContent(Document):
    course_id: ObjectId = Field(..., alias="courseId")
    title: str
    objectives: Optional[str] = None
    link: Optional[str] = None
    files: List[str] = Field(default_factory=list)


class Announcement(Document):
    title: str
    details: str
    course_ids: ObjectId = Field(..., alias="courseIds")  # one announcement per course
