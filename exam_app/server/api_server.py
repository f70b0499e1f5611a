"""FastAPI server that exposes exam publishing, attempts and results."""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
import uvicorn

from exam_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from exam_app.constants.exam_constants import (
    DEFAULT_DURATION_SECONDS,
    DEFAULT_NEGATIVE_MARKING,
    DEFAULT_POSITIVE_MARKS,
)
from exam_app.constants.network_constants import API_LOG_LEVEL, DEFAULT_HOST, DEFAULT_PORT
from exam_app.core.exam_exporter import serialize_questions
from exam_app.core.exam_importer import ExamImportError, import_questions
from exam_app.core.exam_manager import ExamManager
from exam_app.core.markdown_renderer import renderer
from exam_app.core.models import AnswerType, Exam, Question, answer_to_json, normalize_answers


class QuestionPayload(BaseModel):
    """Payload schema for one authored question."""

    text: str
    options: list[str] = Field(default_factory=list)
    answer_type: AnswerType = AnswerType.SINGLE
    correct_answer: int | list[int]
    category: str
    marks: float | None = None
    negative_marks: float | None = None


class ExamPayload(BaseModel):
    """Payload schema for publishing an exam."""

    title: str
    questions: list[QuestionPayload]
    duration_seconds: int = DEFAULT_DURATION_SECONDS
    negative_marking_per_wrong: float = DEFAULT_NEGATIVE_MARKING
    positive_marks_default: float = DEFAULT_POSITIVE_MARKS


class SubmissionPayload(BaseModel):
    """Payload schema for answers and timings collected by the client."""

    student_id: str
    answers: dict[int, int | list[int]] = Field(default_factory=dict)
    question_times: dict[int, float] = Field(default_factory=dict)
    time_taken_seconds: float | None = None


class ImportPayload(BaseModel):
    """Payload schema for pasted question text."""

    text: str
    start_id: int = 1


class StartAttemptPayload(BaseModel):
    student_id: str


class VisitPayload(BaseModel):
    question_id: int


class SelectionPayload(BaseModel):
    question_id: int
    option_index: int


def _to_exam(payload: ExamPayload) -> Exam:
    questions = [
        Question(
            id=index,
            text=question.text,
            options=list(question.options),
            answer_type=question.answer_type,
            correct_answer=question.correct_answer,
            category=question.category,
            marks=question.marks,
            negative_marks=question.negative_marks,
        )
        for index, question in enumerate(payload.questions, start=1)
    ]
    return Exam(
        title=payload.title,
        questions=questions,
        duration_seconds=payload.duration_seconds,
        negative_marking_per_wrong=payload.negative_marking_per_wrong,
        positive_marks_default=payload.positive_marks_default,
    )


def _author_view(question: Question) -> dict[str, object]:
    """Question in the shape `POST /exams` accepts, correct answer included."""
    return {
        "id": question.id,
        "text": question.text,
        "options": question.options,
        "answer_type": question.answer_type.value,
        "correct_answer": answer_to_json(question.correct_answer),
        "category": question.category,
        "marks": question.marks,
        "negative_marks": question.negative_marks,
    }


def _student_view(exam: Exam) -> dict[str, object]:
    """Exam as shown to students: everything except the correct answers."""
    return {
        "key": exam.key,
        "title": exam.title,
        "duration_seconds": exam.duration_seconds,
        "negative_marking_per_wrong": exam.negative_marking_per_wrong,
        "positive_marks_default": exam.positive_marks_default,
        "questions": [
            {
                "id": question.id,
                "text": question.text,
                "text_html": renderer.render_fragment(question.text),
                "options": question.options,
                "options_html": [renderer.render_inline(option) for option in question.options],
                "answer_type": question.answer_type.value,
                "category": question.category,
                "marks": question.marks if question.marks is not None else exam.positive_marks_default,
            }
            for question in exam.questions
        ],
    }


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


def create_api_app(exam_manager: ExamManager) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager."""
    app = FastAPI(
        title=f"{APP_NAME} API",
        version=APP_VERSION,
        description=APP_ABOUT_TEXT,
        license_info={"name": APP_LICENSE},
    )
    exam_manager_dep = _get_exam_manager_dependency(exam_manager)

    @app.post("/exams", status_code=201)
    def publish_exam(
        payload: ExamPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            exam = manager.publish_exam(_to_exam(payload))
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {
            "key": exam.key,
            "exam_id": exam.exam_id,
            "title": exam.title,
            "question_count": len(exam.questions),
            "created_at": exam.created_at.isoformat() if exam.created_at else None,
        }

    @app.get("/exams")
    def list_exams(manager: ExamManager = Depends(exam_manager_dep)) -> list[dict[str, object]]:
        return [
            {"key": exam.key, "title": exam.title, "question_count": len(exam.questions)}
            for exam in manager.get_exams()
        ]

    @app.post("/exams/import")
    def import_exam_questions(payload: ImportPayload) -> dict[str, object]:
        try:
            questions = import_questions(payload.text, payload.start_id)
        except ExamImportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"questions": [_author_view(question) for question in questions]}

    @app.get("/exams/{key}")
    def get_exam(key: str, manager: ExamManager = Depends(exam_manager_dep)) -> dict[str, object]:
        try:
            exam = manager.get_exam(key.upper())
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown exam key {key}") from exc
        return _student_view(exam)

    @app.get("/exams/{key}/export", response_class=PlainTextResponse)
    def export_exam(key: str, manager: ExamManager = Depends(exam_manager_dep)) -> str:
        try:
            exam = manager.get_exam(key.upper())
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown exam key {key}") from exc
        try:
            return serialize_questions(exam.questions)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    @app.post("/exams/{key}/attempts", status_code=201)
    def submit_attempt(
        key: str,
        payload: SubmissionPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            record = manager.submit_answers(
                key.upper(),
                payload.student_id,
                normalize_answers(payload.answers),
                dict(payload.question_times),
                time_taken_seconds=payload.time_taken_seconds,
            )
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown exam key {key}") from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return record.to_dict()

    @app.get("/exams/{key}/attempts")
    def list_attempts(key: str, manager: ExamManager = Depends(exam_manager_dep)) -> list[dict[str, object]]:
        try:
            records = manager.get_attempts(key.upper())
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown exam key {key}") from exc
        return [record.to_dict() for record in records]

    @app.get("/exams/{key}/attempts/{student_id}")
    def get_attempt(
        key: str,
        student_id: str,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            record = manager.get_attempt(key.upper(), student_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc.args[0])) from exc
        return record.to_dict()

    @app.get("/exams/{key}/leaderboard")
    def get_leaderboard(
        key: str,
        limit: int = 3,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> list[dict[str, object]]:
        try:
            rows = manager.get_top_scorers(key.upper(), limit)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown exam key {key}") from exc
        return [
            {
                "student_id": row.student_id,
                "score": row.score,
                "total_marks": row.total_marks,
                "time_taken_seconds": row.time_taken_seconds,
            }
            for row in rows
        ]

    @app.post("/exams/{key}/sessions", status_code=201)
    def start_session(
        key: str,
        payload: StartAttemptPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            session = manager.start_attempt(key.upper(), payload.student_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown exam key {key}") from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {
            "student_id": session.student_id,
            "remaining_seconds": session.remaining_seconds(),
        }

    @app.post("/exams/{key}/sessions/{student_id}/visit")
    def visit_question(
        key: str,
        student_id: str,
        payload: VisitPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            manager.visit_question(key.upper(), student_id, payload.question_id)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {"question_id": payload.question_id}

    @app.post("/exams/{key}/sessions/{student_id}/answer")
    def select_option(
        key: str,
        student_id: str,
        payload: SelectionPayload,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            answer = manager.select_option(
                key.upper(),
                student_id,
                payload.question_id,
                payload.option_index,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return {
            "question_id": payload.question_id,
            "answer": None if answer is None else answer_to_json(answer),
        }

    @app.post("/exams/{key}/sessions/{student_id}/submit", status_code=201)
    def finish_session(
        key: str,
        student_id: str,
        manager: ExamManager = Depends(exam_manager_dep),
    ) -> dict[str, object]:
        try:
            record = manager.finish_attempt(key.upper(), student_id)
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return record.to_dict()

    return app


def _build_server(exam_manager: ExamManager, host: str, port: int) -> uvicorn.Server:
    app = create_api_app(exam_manager)
    config = uvicorn.Config(app=app, host=host, port=port, log_level=API_LOG_LEVEL)
    return uvicorn.Server(config)


def run_api_server(
    exam_manager: ExamManager,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Run the FastAPI server in the calling thread until it is stopped."""
    _build_server(exam_manager, host, port).run()
