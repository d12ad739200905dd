"""
Language-model helpers: answering doubts, generating quizzes and chatting.

The model is a local llama.cpp GGUF file loaded on first use. All calls are
synchronous and happen inside the request that needs them; completions
against the shared model run one at a time.
"""
import json
import logging
import re
import threading

from flask import current_app
from pydantic import ValidationError

from ..schemas import QuizQuestion

logger = logging.getLogger(__name__)

DOUBT_SYSTEM_PROMPT = (
    "You are a helpful teaching assistant. Answer the student's doubt. "
    "If the question is too complex or requires specific context you don't have, "
    "advise them to wait for the teacher."
)

QUIZ_SYSTEM_PROMPT = (
    "Generate a quiz with {count} multiple choice questions based on the provided content. "
    'Return JSON in format: {{"questions": [{{"question": string, "options": string[], '
    '"correctIndex": number}}]}}. '
    "Do NOT include any explanations or markdown formatting."
)

CHAT_SYSTEM_PROMPT = "You are a friendly, helpful tutor. Continue the conversation."

ESCALATION_PHRASES = ('wait for the teacher', 'ask the teacher')


class AssistantError(Exception):
    pass


class AssistantUnavailable(AssistantError):
    pass


class QuizGenerationError(AssistantError):
    pass


class Assistant:
    """Chat-completion client over a lazily loaded ``llama_cpp.Llama`` model."""

    def __init__(self, model_path=None, n_ctx=2048, temperature=0.3, max_tokens=512):
        self.model_path = model_path
        self.n_ctx = n_ctx
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._model = None
        self._lock = threading.Lock()
        # A llama.cpp context serves one completion at a time
        self._inference_lock = threading.Lock()

    @classmethod
    def from_config(cls, config):
        return cls(
            model_path=config.get('LLM_MODEL_PATH'),
            n_ctx=config.get('LLM_CONTEXT_SIZE', 2048),
            temperature=config.get('LLM_TEMPERATURE', 0.3),
            max_tokens=config.get('LLM_MAX_TOKENS', 512),
        )

    def _load(self):
        if self._model is not None:
            return self._model
        with self._lock:
            if self._model is None:
                if not self.model_path:
                    raise AssistantUnavailable("LLM_MODEL_PATH is not configured")
                try:
                    from llama_cpp import Llama
                except ImportError as e:
                    raise AssistantUnavailable(
                        "llama-cpp-python is not installed, install learnhub[llm]"
                    ) from e
                logger.info(f"Loading language model from {self.model_path}")
                self._model = Llama(model_path=self.model_path, n_ctx=self.n_ctx, verbose=False)
        return self._model

    def chat(self, messages, json_mode=False):
        model = self._load()
        options = {}
        if json_mode:
            options['response_format'] = {'type': 'json_object'}
        with self._inference_lock:
            response = model.create_chat_completion(
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                **options,
            )
        content = response['choices'][0]['message'].get('content') or ''
        return content.strip()


def get_assistant():
    return current_app.extensions['assistant']


# ---- Doubts ----

def needs_teacher(answer):
    """True when the assistant reply defers the question to the teacher."""
    text = (answer or '').lower()
    if not text:
        return True
    return any(phrase in text for phrase in ESCALATION_PHRASES)


def answer_doubt(question, module=None):
    prompt = question
    if module is not None:
        context = module.content or module.description or ''
        prompt = f"Lecture: {module.title}\n{context}\n\nQuestion: {question}"
    messages = [
        {'role': 'system', 'content': DOUBT_SYSTEM_PROMPT},
        {'role': 'user', 'content': prompt},
    ]
    return get_assistant().chat(messages)


def triage_doubt(question, module=None):
    """Ask the assistant first; return ``(ai_answer, is_resolved, is_escalated)``.

    Any failure escalates the doubt instead of failing the request.
    """
    try:
        answer = answer_doubt(question, module)
    except Exception:
        logger.exception("Assistant failed to answer doubt, escalating to teacher")
        return None, False, True

    if needs_teacher(answer):
        return answer or None, False, True
    return answer, True, False


# ---- Quizzes ----

def extract_json(text):
    """Parse JSON from model output, tolerating code fences and surrounding text."""
    cleaned = re.sub(r"```(?:json)?", "", text or "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    start, end = cleaned.find('['), cleaned.rfind(']')
    if start == -1 or end <= start:
        raise QuizGenerationError("No JSON found in model output")
    try:
        return json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise QuizGenerationError(f"Invalid JSON in model output: {e}") from e


def parse_quiz_questions(raw):
    """Turn model output into a list of ``{question, options, correctIndex}``.

    Both a bare array and ``{"questions": [...]}`` are accepted.
    """
    data = extract_json(raw)
    if isinstance(data, dict):
        data = data.get('questions')
    if not isinstance(data, list) or not data:
        raise QuizGenerationError("Model output does not contain a list of questions")

    questions = []
    for idx, item in enumerate(data):
        try:
            question = QuizQuestion.model_validate(item)
        except ValidationError as e:
            raise QuizGenerationError(f"Question at index {idx} is invalid: {e}") from e
        questions.append(question.model_dump(by_alias=True))
    return questions


def generate_quiz_questions(module, count=3):
    content = module.content or module.description or ''
    messages = [
        {'role': 'system', 'content': QUIZ_SYSTEM_PROMPT.format(count=count)},
        {'role': 'user', 'content': f"Title: {module.title}. Content: {content}"},
    ]
    raw = get_assistant().chat(messages, json_mode=True)
    return parse_quiz_questions(raw)


# ---- Chat ----

def chat_reply(history):
    messages = [{'role': 'system', 'content': CHAT_SYSTEM_PROMPT}]
    messages.extend({'role': m.role, 'content': m.content} for m in history)
    reply = get_assistant().chat(messages)
    if not reply:
        raise AssistantError("Empty reply from model")
    return reply
