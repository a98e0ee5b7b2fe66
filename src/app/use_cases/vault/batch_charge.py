"""BatchCharge Use Case

Charges a list of subscriptions one by one. Each charge commits or fails
on its own; a failure never stops or undoes the others.
"""

import logging
from typing import List
from libs.result import Result, Return
from src.domain.error_codes import numeric_code
from .charge_subscription import ChargeSubscription
from .dtos import BatchChargeCommandDTO, BatchChargeResponseDTO, BatchChargeResultDTO

logger = logging.getLogger(__name__)


class BatchCharge:

    def __init__(self, charge_subscription: ChargeSubscription):
        self.charge_subscription = charge_subscription

    async def execute(self, command: BatchChargeCommandDTO) -> Result[BatchChargeResponseDTO]:
        results: List[BatchChargeResultDTO] = []

        for subscription_id in command.subscription_ids:
            result = await self.charge_subscription.execute(subscription_id)
            if result.is_ok():
                results.append(BatchChargeResultDTO(subscription_id=subscription_id, success=True))
                continue

            logger.info(
                f"Batch charge of subscription {subscription_id} failed: "
                f"{result.error.code} {result.error.message}"
            )
            results.append(
                BatchChargeResultDTO(
                    subscription_id=subscription_id,
                    success=False,
                    error_code=numeric_code(result.error.code),
                )
            )

        succeeded = sum(1 for r in results if r.success)
        logger.info(f"Batch charge complete: {succeeded}/{len(results)} succeeded")

        return Return.ok(
            BatchChargeResponseDTO(
                results=results,
                total=len(results),
                succeeded=succeeded,
                failed=len(results) - succeeded,
            )
        )
