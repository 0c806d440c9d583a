"""
Quality evaluator: a pass/fail verdict on one sub-agent output.
"""

from ..models.contracts import Evaluation
from ..models.enums import QualityVerdict
from ..utils.logging import get_logger
from .client import LLMClient

logger = get_logger(__name__)

EVALUATION_INSTRUCTIONS = """You review the output of one step of a research workflow.

Judge whether the output fulfills the request it was produced for:
- it answers the request completely and stays on topic
- it follows the format the request asked for
- it is not truncated, empty or a refusal

Be pragmatic: minor style issues are not a failure.

Reply ONLY with a JSON object: {"quality": "pass" | "fail", "feedback": "<what to improve, empty when passing>"}"""

EVALUATION_PROMPT = """Action: {action}

Request:
{prompt}

Output:
{output}"""


class QualityEvaluator:
    """
    Reviews sub-agent outputs with an LLM.

    Example:
        evaluator = QualityEvaluator(client)
        evaluation = await evaluator.evaluate("openai", "openai/gpt-4o-mini", "Write Section 1", prompt, output)
    """

    def __init__(self, client: LLMClient, model: str | None = None):
        self.client = client
        self.model = model

    def _resolve_model(self, engine: str | None, model: str | None) -> str | None:
        model = self.model or model
        if model and engine and "/" not in model:
            return f"{engine}/{model}"
        return model

    async def evaluate(
        self,
        engine: str | None,
        model: str | None,
        action_label: str,
        prompt_text: str,
        output_text: str,
    ) -> Evaluation:
        """
        Evaluate an output against the prompt that produced it.

        Evaluator failures never block a run: the output is treated as
        passing and a warning is logged.
        """
        messages = [
            {"role": "system", "content": EVALUATION_INSTRUCTIONS},
            {
                "role": "user",
                "content": EVALUATION_PROMPT.format(
                    action=action_label, prompt=prompt_text, output=output_text
                ),
            },
        ]

        try:
            response = await self.client.complete(
                messages,
                model=self._resolve_model(engine, model),
                response_schema=Evaluation,
                temperature=0.0,
            )
        except Exception as e:
            logger.warning(
                "quality_evaluation_failed",
                action=action_label,
                error=str(e),
                error_type=type(e).__name__,
            )
            return Evaluation(quality=QualityVerdict.PASS, feedback="")

        evaluation: Evaluation = response.content
        logger.info("quality_evaluated", action=action_label, quality=str(evaluation.quality))
        return evaluation
