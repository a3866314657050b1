"""
Google Gemini service for document analysis and follow-up questions
"""

import asyncio
import json
import re

import google.generativeai as genai
from loguru import logger
from pydantic import ValidationError

from ..config import REFUSAL_SENTENCE
from ..exceptions import AnswerFailedError, LlmInvocationError, LlmParseError
from ..models.schemas import AnalysisResult

_FENCE_PATTERN = re.compile(r"```(?:json)?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model sometimes wraps JSON in"""
    return _FENCE_PATTERN.sub("", text).strip()


def build_analysis_prompt(text: str, language: str) -> str:
    """Create the single structured prompt for document analysis"""
    return f"""
You are an expert legal document analyzer named "Lexi Simplify".
Your task is to analyze the following document text and provide a structured JSON output.
All explanations must be in extremely simple, clear, and plain language.

Document Text:
\"\"\"
{text}
\"\"\"

Based on the text, provide the following in a single JSON object:
1. "category": A one or two-word category for the document.
2. "summary": A comprehensive and highly detailed summary of the entire document.
3. "risks": An array of strings, where each string is a potential risk or obligation.
4. "jargon": An array of objects, each with a "term" and an "explanation".
5. "translations": An object containing the translation of the 'summary' and 'risks' fields into **{language}**. The object must have two keys: "summary" (a string) and "risks" (an array of strings).

Respond with the JSON object only.
"""


def build_question_prompt(summary: str, question: str) -> str:
    """Create the prompt that limits answers to the supplied summary"""
    return f"""
You are a helpful Q&A assistant for a legal document analysis tool.
Your task is to answer the user's question based ONLY on the provided summary of a legal document.
The question can be anything about the summary and related to it but if the question is not at all related to the summary, you MUST respond with: "{REFUSAL_SENTENCE}"

Here is the document summary:
\"\"\"
{summary}
\"\"\"

Here is the user's question:
\"\"\"
{question}
\"\"\"

Provide your answer:
"""


class GeminiService:
    """Service for interacting with Google Gemini models"""

    def __init__(self, model: genai.GenerativeModel, max_prompt_chars: int = 25000):
        self.model = model
        self.max_prompt_chars = max_prompt_chars

    @classmethod
    def from_api_key(cls, api_key: str, model_name: str, max_prompt_chars: int = 25000) -> "GeminiService":
        genai.configure(api_key=api_key)
        return cls(genai.GenerativeModel(model_name), max_prompt_chars)

    async def _make_prediction_request(self, prompt: str) -> str:
        """Make a single prediction request to the Gemini API"""
        def sync_predict():
            response = self.model.generate_content(prompt)
            return response.text

        # Run the synchronous SDK call in a thread pool
        return await asyncio.get_running_loop().run_in_executor(None, sync_predict)

    async def analyze_document(self, text: str, language: str) -> AnalysisResult:
        """
        Analyze extracted document text.

        The text is cut to ``max_prompt_chars`` before prompting; the result
        does not record whether that happened.
        """
        prompt = build_analysis_prompt(text[:self.max_prompt_chars], language)

        try:
            result_text = await self._make_prediction_request(prompt)
        except Exception as e:
            logger.error(f"Gemini analysis request failed: {e}")
            raise LlmInvocationError(str(e)) from e

        try:
            return AnalysisResult.model_validate(json.loads(strip_code_fences(result_text)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Gemini returned an unusable analysis: {e}")
            logger.debug(f"Raw Gemini output: {result_text[:500]}")
            raise LlmParseError(str(e)) from e

    async def answer_question(self, summary: str, question: str) -> str:
        """Answer a free-form question from the summary alone"""
        try:
            answer = await self._make_prediction_request(build_question_prompt(summary, question))
        except Exception as e:
            logger.error(f"Gemini Q&A request failed: {e}")
            raise AnswerFailedError(str(e)) from e

        return answer.strip()
