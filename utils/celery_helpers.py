"""
Celery utility functions.
Provides helpers for working with Celery tasks and formatting task results.
"""

from typing import Any, Dict, Union


def format_celery_error(result_info: Any) -> Union[Dict[str, Any], str]:
    """
    Format Celery task error information for API responses.

    Extracts error details from Celery's AsyncResult.info and formats them
    consistently for API responses. Handles both dict and non-dict error formats.
    """
    # Handle non-dict formats (simple errors)
    if not isinstance(result_info, dict):
        return str(result_info) if result_info else "Unknown error"

    # Extract structured error information from dict
    return {
        "message": result_info.get("exc_message", "Unknown error"),
        "type": result_info.get("exc_type", "Error"),
        "failed_step": result_info.get("failed_step"),
        "execution_id": result_info.get("execution_id"),
    }


def build_task_status(task_id: str, result: Any) -> Dict[str, Any]:
    """
    Turn an AsyncResult-like object into the task status payload.

    - PENDING: queued, or the result expired
    - STARTED: running; result carries the current step and its status
    - SUCCESS: result carries execution_id and the final status
    - FAILURE: error carries message, type and failed step
    """
    payload: Dict[str, Any] = {
        "task_id": task_id,
        "status": result.state,
        "result": None,
        "error": None,
    }

    if result.state == "SUCCESS":
        payload["result"] = result.result if isinstance(result.result, dict) else {"value": result.result}

    elif result.state == "FAILURE":
        payload["error"] = format_celery_error(result.info)

    elif result.state == "STARTED" and isinstance(result.info, dict):
        payload["result"] = {
            "current_step": result.info.get("current_step"),
            "step_status": result.info.get("step_status"),
        }

    return payload
