from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Union

from oca_web.domain.models import AnalysisRequest, DocumentPayload

MASTER_PROMPT_PATH = Path(__file__).resolve().parent / "master_prompt.txt"


@lru_cache(maxsize=1)
def load_master_prompt() -> str:
    return MASTER_PROMPT_PATH.read_text(encoding="utf-8")


def build_parameter_prompt(provider: str, budget: str, services: str) -> str:
    return (
        "Client-defined parameters:\n"
        f"- Cloud provider(s): {provider}\n"
        f"- Expected monthly budget range: {budget}\n"
        f"- Core services in use: {services}\n\n"
        "Please analyze the provided billing document(s) and generate the report "
        "strictly following the OUTPUT FORMAT specified in your system role."
    )


def build_csv_block(csv_text: str) -> str:
    return "---INPUTS RECEIVED:\nBilling Data (CSV Content):\n```csv\n" + csv_text + "\n```\n"


def build_parts(request: AnalysisRequest) -> List[Union[str, DocumentPayload]]:
    """
    Ordered prompt parts: CSV blocks first, then the parameter prompt,
    then binary documents (left as payloads for the adapter to attach).
    """
    texts = [build_csv_block(d.content) for d in request.documents if not d.is_base64]
    binaries = [d for d in request.documents if d.is_base64]
    return [*texts, build_parameter_prompt(request.provider, request.budget, request.services), *binaries]
