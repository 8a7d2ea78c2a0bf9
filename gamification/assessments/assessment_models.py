from datetime import datetime
from enum import Enum
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, Field

from gamification.core.documents import Document

# ==================== ENUMS ====================

class GradingMode(str, Enum):
    AI = "ai"
    MANUAL = "manual"

# ==================== DATABASE MODELS ====================

class MarkingGuide(BaseModel):
    """Rubric for automatic grading"""
    model_config = {"populate_by_name": True}

    question: str
    expected_answer: str = Field(..., alias="expectedAnswer")
    keywords: List[str] = Field(default_factory=list)


class Assessment(Document):
    course_id: ObjectId = Field(..., alias="courseId")
    instructor_id: ObjectId = Field(..., alias="instructorId")
    title: str
    question: str
    highest_attainable_score: float = Field(..., alias="highestAttainableScore")
    marking_guide: Optional[MarkingGuide] = Field(None, alias="markingGuide")
    file: Optional[str] = None  # public URL


class Submission(Document):
    assessment_id: ObjectId = Field(..., alias="assessmentId")
    learner_id: ObjectId = Field(..., alias="learnerId")
    answer_text: str = Field(..., alias="answerText")
    file: Optional[str] = None
    score: Optional[float] = None
    comments: Optional[str] = None
    graded: bool = False
    grading_mode: Optional[GradingMode] = Field(None, alias="gradingMode")
    graded_by: Optional[ObjectId] = Field(None, alias="gradedBy")
    graded_at: Optional[datetime] = Field(None, alias="gradedAt")
