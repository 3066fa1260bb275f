"""
Prompts and response formats for the two chat-completion calls.
"""

import json
from typing import Any, Optional

MATCH_SYSTEM_PROMPT = (
    "You are helpful assistant who picks the most similar item from a provided json list "
    "to a provided json list item. Choose only from the provided list, never invent any "
    "non existing item."
)

CONFIDENCE_SYSTEM_PROMPT = (
    "You are a helpful assistant that evaluates the quality of a match between a searched item "
    "and a matched item from a list. Provide a confidence score from 1 to 100, where 100 means "
    "you are extremely confident this is an excellent match (the items are virtually identical "
    "or perfectly align with provided instructions below), and 1 means this is an extremely weak "
    "match (minimal or no meaningful correspondence). Use the full range: assign scores close to "
    "100 for strong matches, mid-range scores (40-60) for uncertain or partial matches, and "
    "scores close to 1 for very poor matches."
)

MATCH_RESPONSE_FORMAT = {"type": "json_object"}

CONFIDENCE_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "similarity_score_response",
        "schema": {
            "type": "object",
            "properties": {
                "confidence_score": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 100,
                },
                "reasoning": {
                    "type": "string",
                    "description": "The reasoning behind the similarity score",
                    "minLength": 50,
                    "maxLength": 300,
                },
            },
            "required": ["confidence_score", "reasoning"],
            "additionalProperties": False,
        },
    },
}


def to_json(value: Any) -> str:
    """Serialize for prompts, keeping non-ASCII characters readable."""
    return json.dumps(value, ensure_ascii=False)


def build_match_system_prompt(
    system_message: Optional[str] = None,
    description_of_list: Optional[str] = None,
    additional_instructions: Optional[str] = None,
) -> str:
    """System prompt for picking the best candidate. An override replaces the default."""
    prompt = system_message or MATCH_SYSTEM_PROMPT

    if description_of_list:
        prompt += f'\nList items are described as follows: "{description_of_list}".'

    if additional_instructions:
        prompt += f'\nAdditional instructions: "{additional_instructions}".'

    return prompt


def build_match_user_prompt(records: list, search_key: str, search_value: Any) -> str:
    return (
        f"List: {to_json(records)}\n"
        f"List item: {to_json({search_key: search_value})}"
    )


def build_confidence_system_prompt(
    system_message: Optional[str] = None,
    description_of_list: Optional[str] = None,
    additional_instructions: Optional[str] = None,
) -> str:
    """
    System prompt for scoring an existing match.

    The override used for matching is passed along as context here,
    it never replaces the scoring instructions.
    """
    prompt = CONFIDENCE_SYSTEM_PROMPT

    if description_of_list:
        prompt += f'\nList items are described as follows: "{description_of_list}".'

    if system_message:
        prompt += f'\nImportant instructions used for the matching process: "{system_message}".'

    if additional_instructions:
        prompt += (
            f'\nAdditional instructions used for the matching process: "{additional_instructions}".'
        )

    return prompt


def build_confidence_user_prompt(search_key: str, search_value: Any, matched_record: dict) -> str:
    return (
        f"Searched item: {to_json({search_key: search_value})}\n"
        f"Matched item: {to_json(matched_record)}"
    )


def build_request(model: str, system_prompt: str, user_prompt: str, response_format: dict) -> dict:
    """Chat-completion request body."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "response_format": response_format,
    }
