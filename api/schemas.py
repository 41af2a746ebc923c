"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class BetRequest(BaseModel):
    """Request to place a bet."""

    amount: int = Field(..., ge=1, description="Bet amount")


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand"]


class CardResponse(BaseModel):
    """Card representation; rank and suit are omitted while the card is face down."""

    model_config = ConfigDict(from_attributes=True)

    rank: str | None = None
    suit: str | None = None
    value: int | None = None
    hidden: bool = False


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int | None
    is_soft: bool = False


class GameStateResponse(BaseModel):
    """Current game state."""

    round_state: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    chips: int
    current_bet: int
    result_message: str
    outcome: str | None
    payout: int
    cards_remaining: int
    bet_denominations: list[int]
    can_deal: bool
    can_hit: bool
    can_stand: bool
    can_start_new_round: bool


class RejectionResponse(BaseModel):
    """Why an action was refused."""

    reason: str
    message: str
