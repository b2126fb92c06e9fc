"""
Staking Service

Bitpanda has no staking endpoints, so the catalogue of stakable assets and
their APYs is static. When an API key is configured the user's crypto wallets
are matched against the catalogue to estimate yearly rewards.
"""

import logging
from decimal import Decimal
from typing import Dict, List

from panda_explorer.constants import STAKING_ASSETS, STAKING_DISCLAIMER
from panda_explorer.parsing import ZERO
from panda_explorer.schemas.views import StakingAsset, StakingView, UserStakingHolding, WalletItem
from panda_explorer.services.portfolio_aggregator import PortfolioAggregator

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def get_staking_assets() -> List[StakingAsset]:
    return [StakingAsset.model_validate(asset) for asset in STAKING_ASSETS]


def estimate_holdings(wallets: List[WalletItem], assets: List[StakingAsset]) -> List[UserStakingHolding]:
    """Holdings eligible for staking with estimated annual rewards, largest value first"""
    by_symbol: Dict[str, StakingAsset] = {asset.symbol.upper(): asset for asset in assets}

    holdings = []
    for wallet in wallets:
        asset = by_symbol.get(wallet.symbol.upper())
        if asset is None or wallet.balance <= 0:
            continue
        value = wallet.value_in_reference_currency or ZERO
        rate = asset.estimated_apy / HUNDRED
        holdings.append(UserStakingHolding(
            symbol=wallet.symbol,
            name=asset.name,
            balance=wallet.balance,
            value_in_reference_currency=value,
            estimated_apy=asset.estimated_apy,
            estimated_annual_reward=wallet.balance * rate,
            estimated_annual_reward_value=value * rate,
        ))

    holdings.sort(key=lambda h: h.value_in_reference_currency, reverse=True)
    return holdings


async def get_staking_overview(aggregator: PortfolioAggregator) -> StakingView:
    """Catalogue plus, when authenticated, the user's eligible holdings"""
    assets = get_staking_assets()
    has_key = aggregator.has_credential()
    if not has_key:
        return StakingView(has_api_key=False, staking_assets=assets, disclaimer=STAKING_DISCLAIMER)

    wallets = await aggregator.get_wallets()
    if not wallets.is_success:
        logger.warning(f"Could not load holdings for staking estimate: {wallets.error_message}")
        return StakingView(
            has_api_key=True,
            staking_assets=assets,
            disclaimer=STAKING_DISCLAIMER,
            error_message="Could not fetch holdings",
        )

    holdings = estimate_holdings(wallets.crypto_wallets, assets)
    return StakingView(
        has_api_key=True,
        staking_assets=assets,
        user_holdings=holdings,
        total_eligible_value=sum((h.value_in_reference_currency for h in holdings), ZERO),
        estimated_annual_rewards_value=sum((h.estimated_annual_reward_value for h in holdings), ZERO),
        disclaimer=STAKING_DISCLAIMER,
    )
