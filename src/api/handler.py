"""Bridge request handler.

The boundary between the editor transport and the reconciliation pipeline.
``handle`` never raises: every failure is reported as ``success=false``
with a readable error, and ``ping`` is answered without touching any
participant.
"""

from __future__ import annotations

from src.core.constants import DEFAULT_TARGET_FILE
from src.core.exceptions import ReconciliationError
from src.core.logging import get_logger
from src.reconciliation.orchestrator import ReconciliationOrchestrator
from src.reconciliation.parser import extract_explanation
from src.reconciliation.prompts import PromptInput, build_proposal_prompt
from src.schemas.bridge import (
    BridgeRequest,
    BridgeResponse,
    ConsensusSummary,
    EditSchema,
    RequestType,
)


logger = get_logger(__name__)

PONG = "pong"


def build_prompt(request: BridgeRequest) -> str:
    """Build the proposal prompt for a request."""
    context = request.context
    return build_proposal_prompt(
        PromptInput(
            instruction=request.instruction,
            filename=request.filename,
            code=request.code,
            selected_text=context.selected_text if context else None,
            open_files=tuple(context.open_files) if context else (),
            project_tree=context.project_tree if context else None,
        )
    )


class BridgeRequestHandler:
    """Turns editor requests into reconciled responses."""

    def __init__(self, orchestrator: ReconciliationOrchestrator) -> None:
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> ReconciliationOrchestrator:
        return self._orchestrator

    async def handle(self, request: BridgeRequest) -> BridgeResponse:
        """Answer one request.

        Args:
            request: Validated editor request

        Returns:
            BridgeResponse echoing the request id
        """
        if request.type is RequestType.PING:
            return BridgeResponse(id=request.id, success=True, explanation=PONG)

        log = logger.bind(request_id=request.id, request_type=request.type.value)
        try:
            prompt = build_prompt(request)
            selection = request.context.selection_range if request.context else None
            result = await self._orchestrator.run(
                prompt,
                enabled_participants=request.enabled_participants,
                current_file=request.filename or DEFAULT_TARGET_FILE,
                selection_range=selection.to_range() if selection else None,
            )
        except ReconciliationError as e:
            log.warning("Reconciliation failed", error=e.message)
            return BridgeResponse(id=request.id, success=False, error=e.message)
        except Exception as e:
            log.exception("Unexpected error while handling request")
            return BridgeResponse(
                id=request.id,
                success=False,
                error=f"{type(e).__name__}: {e}",
            )

        log.info(
            "Request reconciled",
            winner=result.winner_participant.value,
            strategy=result.merge_strategy.value,
            edits=len(result.edits),
        )
        return BridgeResponse(
            id=request.id,
            success=True,
            edits=[EditSchema.from_edit(edit) for edit in result.edits],
            explanation=extract_explanation(result.final_proposal_text),
            consensus=ConsensusSummary.from_result(result),
        )
