"""
LLM-based lookup of the closest item in a list using OpenAI.
"""

from collections.abc import Mapping
from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from shared.config import Settings, get_settings
from shared.exceptions import ApiResponseError, ConfigurationError, InputError
from shared.models import ConfidenceEvaluation, MatchOutcome

from . import prompts
from .transport import ChatCompletionClient

_MISSING = object()


def same_value(left: Any, right: Any) -> bool:
    """Strict equality: values must share a type, so True never equals 1."""
    return type(left) is type(right) and left == right


class ItemFinder:
    """
    Finds the closest item in a list to a searched value using an LLM.

    Configure with the chainable setters, then call find():

        finder.set_list(cities).set_searched_item("city", "Prague").find()

    An instance is meant for one search at a time. It is not safe to share
    between threads.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.settings = settings or get_settings()

        if api_key is None:
            api_key = self.settings.openai_api_key.get_secret_value()
        if not api_key:
            raise ConfigurationError(
                "OpenAI API key is missing. Please set the AI_ITEM_FINDER_OPENAI_API_KEY "
                "environment variable or pass api_key explicitly."
            )

        self.model = model or self.settings.openai_model
        self.api = ChatCompletionClient(
            api_key=api_key,
            api_url=api_url or self.settings.openai_api_url,
            timeout=self.settings.request_timeout,
            http_client=http_client,
        )

        self.list: list[dict] = []
        self.search_key: Optional[str] = None
        self.search_value: Any = None
        self.description_of_list: Optional[str] = None
        self.additional_instructions: Optional[str] = None
        self.system_message: Optional[str] = None
        self.allow_no_result: bool = True
        self.no_result_threshold: int = 80

        self._confidence_score: Optional[int] = None
        self._confidence_reasoning: Optional[str] = None
        self._last_outcome: Optional[MatchOutcome] = None

    def set_list(self, items: list[dict]) -> "ItemFinder":
        """Set list of items to search through."""
        self.list = list(items)
        return self

    def set_searched_item(self, key: str, value: Any) -> "ItemFinder":
        """
        Set the item to search for in the list.

        Args:
            key: Field of the list items to match on
            value: The value to find a match for
        """
        self.search_key = key
        self.search_value = value
        return self

    def set_description_of_list(self, description: str) -> "ItemFinder":
        """Describe the list items to give the model more context."""
        self.description_of_list = description
        return self

    def set_additional_instructions(self, instructions: str) -> "ItemFinder":
        self.additional_instructions = instructions
        return self

    def set_system_message(self, system_message: str) -> "ItemFinder":
        """Replace the system message of the match call entirely."""
        self.system_message = system_message
        return self

    def set_allow_no_result(self, allow_no_result: bool = True) -> "ItemFinder":
        """
        Allow find() to return None when the best match is not good enough.

        Enables the confidence scoring call and the threshold set by
        set_no_result_threshold().
        """
        self.allow_no_result = allow_no_result
        return self

    def set_no_result_threshold(self, threshold: int) -> "ItemFinder":
        """
        Set the confidence (0-100) under which a match is dropped.

        Only used when allow_no_result is enabled.
        """
        if isinstance(threshold, bool) or not isinstance(threshold, int):
            raise ConfigurationError(
                f"No result confidence threshold must be an integer. Given value: {threshold!r}."
            )
        if threshold < 0 or threshold > 100:
            raise ConfigurationError(
                f"No result confidence threshold must be between 0 and 100. Given value: {threshold}."
            )

        self.no_result_threshold = threshold
        return self

    def set_model(self, model: str) -> "ItemFinder":
        self.model = model
        return self

    def get_confidence_score(self) -> Optional[int]:
        """Confidence score (1-100) of the last scored match, None if nothing was scored yet."""
        return self._confidence_score

    def get_confidence_reasoning(self) -> Optional[str]:
        """Reasoning behind the last confidence score, None if nothing was scored yet."""
        return self._confidence_reasoning

    @property
    def last_outcome(self) -> Optional[MatchOutcome]:
        return self._last_outcome

    def close(self) -> None:
        self.api.close()

    def find(self) -> Optional[dict]:
        """
        Find the closest matching item from the list.

        Returns:
            The matching item from the list, or None if allow_no_result is
            enabled and the match scored below the threshold

        Raises:
            InputError: List or searched item not set
            ApiResponseError: The API failed or picked an item not in the list
        """
        self._validate_input()

        logger.info(
            f"Searching {len(self.list)} items for {self.search_key}={self.search_value!r} "
            f"(model: {self.model})"
        )

        request = prompts.build_request(
            model=self.model,
            system_prompt=prompts.build_match_system_prompt(
                self.system_message,
                self.description_of_list,
                self.additional_instructions,
            ),
            user_prompt=self._match_user_prompt(),
            response_format=prompts.MATCH_RESPONSE_FORMAT,
        )

        picked_item = self.api.complete(request)
        matched_record = self._resolve_picked_item(picked_item)

        logger.info(f"Model picked {self.search_key}={matched_record[self.search_key]!r}")

        if not self.allow_no_result:
            self._last_outcome = MatchOutcome(matched_record=matched_record)
            return matched_record

        evaluation = self._evaluate_confidence(matched_record)

        self._confidence_score = evaluation.confidence_score
        self._confidence_reasoning = evaluation.reasoning

        if evaluation.confidence_score < self.no_result_threshold:
            logger.info(
                f"Match dropped: confidence {evaluation.confidence_score} "
                f"is below threshold {self.no_result_threshold}"
            )
            self._last_outcome = MatchOutcome(
                matched_record=None,
                confidence_score=evaluation.confidence_score,
                confidence_reasoning=evaluation.reasoning,
            )
            return None

        logger.info(f"Match accepted with confidence {evaluation.confidence_score}")
        self._last_outcome = MatchOutcome(
            matched_record=matched_record,
            confidence_score=evaluation.confidence_score,
            confidence_reasoning=evaluation.reasoning,
        )
        return matched_record

    def _validate_input(self) -> None:
        if len(self.list) == 0:
            raise InputError("List is not set! Use set_list() method.")

        if not self.search_key:
            raise InputError("Searched item is not set! Use set_searched_item() method.")

    def _match_user_prompt(self) -> str:
        try:
            return prompts.build_match_user_prompt(self.list, self.search_key, self.search_value)
        except (TypeError, ValueError) as e:
            raise InputError(f"List or searched item is not JSON serializable: {e}") from e

    def _resolve_picked_item(self, picked_item: Any) -> dict:
        """Map the model's answer back to the first equal record of the original list."""
        if not isinstance(picked_item, Mapping):
            raise ApiResponseError("Picked item is not a valid JSON object.")

        if self.search_key not in picked_item:
            raise ApiResponseError("Picked item does not contain the searched item key.")

        picked_value = picked_item[self.search_key]
        for record in self.list:
            if not isinstance(record, Mapping):
                continue
            if same_value(record.get(self.search_key, _MISSING), picked_value):
                return record

        raise ApiResponseError(
            f"Picked item is not in the provided list: {self.search_key}={picked_value!r}."
        )

    def _evaluate_confidence(self, matched_record: dict) -> ConfidenceEvaluation:
        """Ask for an independent score of the match in a second call."""
        request = prompts.build_request(
            model=self.model,
            system_prompt=prompts.build_confidence_system_prompt(
                self.system_message,
                self.description_of_list,
                self.additional_instructions,
            ),
            user_prompt=prompts.build_confidence_user_prompt(
                self.search_key, self.search_value, matched_record
            ),
            response_format=prompts.CONFIDENCE_RESPONSE_FORMAT,
        )

        result = self.api.complete(request)

        if not isinstance(result, Mapping):
            raise ApiResponseError("Confidence evaluation is not a valid JSON object.")

        try:
            return ConfidenceEvaluation.model_validate(result)
        except ValidationError as e:
            raise ApiResponseError(f"Invalid confidence evaluation: {e}") from e
