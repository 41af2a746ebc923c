"""Game API endpoints."""

import logging
from fastapi import APIRouter, HTTPException, Header
from typing import Annotated, Any

from api.schemas import (
    BetRequest,
    ActionRequest,
    CardResponse,
    GameStateResponse,
    HandResponse,
    RejectionResponse,
)
from api.session import (
    cleanup_sessions,
    create_session,
    extract_session_id,
    get_session,
    load_table,
    save_table,
)
from config import config
from core.cards import Card, Deck, Rank, Suit
from core.game import BlackjackGame, GameState, Outcome, Rejected, RoundState, build_table_view
from core.hand import Hand

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory game cache (for performance, backed by session store)
_games: dict[str, BlackjackGame] = {}


def _serialize_card(card: Card) -> dict[str, int]:
    """Serialize a card to a dict."""
    return {"rank": card.rank.value, "suit": card.suit.value}


def _deserialize_card(data: dict[str, int]) -> Card:
    """Deserialize a card from a dict."""
    return Card(Rank(data["rank"]), Suit(data["suit"]))


def _serialize_state(state: GameState) -> dict[str, Any]:
    """Serialize game state for session storage."""
    return {
        "round_state": state.round_state.name,
        "deck": [_serialize_card(c) for c in state.deck],
        "player_hand": [_serialize_card(c) for c in state.player_hand],
        "dealer_hand": [_serialize_card(c) for c in state.dealer_hand],
        "result_message": state.result_message,
        "chips": state.chips,
        "current_bet": state.current_bet,
        "outcome": state.outcome.name if state.outcome else None,
        "payout": state.payout,
    }


def _deserialize_state(data: dict[str, Any]) -> GameState:
    """Restore game state from session data."""
    return GameState(
        deck=Deck(tuple(_deserialize_card(c) for c in data["deck"])),
        player_hand=Hand(tuple(_deserialize_card(c) for c in data["player_hand"])),
        dealer_hand=Hand(tuple(_deserialize_card(c) for c in data["dealer_hand"])),
        round_state=RoundState[data["round_state"]],
        result_message=data["result_message"],
        chips=data["chips"],
        current_bet=data["current_bet"],
        outcome=Outcome[data["outcome"]] if data["outcome"] else None,
        payout=data["payout"],
    )


async def _load_game(session_id: str) -> BlackjackGame | None:
    """Rebuild a session's game from its saved table."""
    table = await load_table(session_id)
    if table is None:
        return None
    return BlackjackGame(state=_deserialize_state(table), strict=False)


async def _save_game(session_id: str, game: BlackjackGame) -> None:
    """Persist the game's state into the session."""
    await save_table(session_id, _serialize_state(game.state))


def _new_game() -> BlackjackGame:
    """Create a fresh table; rejections are reported as HTTP errors, never raised."""
    return BlackjackGame(chips=config.game.starting_chips, strict=False)


async def _get_game(session_id: str) -> BlackjackGame:
    """Get or create the game for a verified, live session."""
    if extract_session_id(session_id) is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    record = await get_session(session_id)
    if record is None:
        _games.pop(session_id, None)
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    # Check memory cache first
    if session_id in _games:
        return _games[session_id]

    # Try to load from session store
    game = await _load_game(session_id)
    if game is not None:
        _games[session_id] = game
        return game

    game = _new_game()
    _games[session_id] = game
    await _save_game(session_id, game)
    return game


async def _prune_games() -> None:
    """Expire stale sessions and forget the cached games they owned."""
    await cleanup_sessions()
    orphaned = [token for token in _games if await get_session(token) is None]
    for token in orphaned:
        del _games[token]
    if orphaned:
        logger.info("Evicted %d cached games", len(orphaned))


def _card_to_response(card: Card | None) -> CardResponse:
    """Convert a card, or a concealed slot, to CardResponse."""
    if card is None:
        return CardResponse(hidden=True)
    return CardResponse(rank=str(card.rank), suit=str(card.suit), value=card.value)


def _game_state_response(game: BlackjackGame) -> GameStateResponse:
    """Convert game state to response, hiding what the player may not see."""
    view = build_table_view(game.state)
    return GameStateResponse(
        round_state=view.round_state.name,
        player_hand=HandResponse(
            cards=[_card_to_response(c) for c in view.player_cards],
            value=view.player_value,
            is_soft=view.player_soft,
        ),
        dealer_hand=HandResponse(
            cards=[_card_to_response(c) for c in view.dealer_cards],
            value=view.dealer_value,
        ),
        chips=view.chips,
        current_bet=view.current_bet,
        result_message=view.result_message,
        outcome=view.outcome.name if view.outcome else None,
        payout=view.payout,
        cards_remaining=view.cards_remaining,
        bet_denominations=list(config.game.bet_denominations),
        can_deal=game.can_deal,
        can_hit=game.can_hit,
        can_stand=game.can_stand,
        can_start_new_round=game.can_start_new_round,
    )


def _raise_if_rejected(result: Any) -> None:
    """Map a rejected action to a 400 response."""
    if isinstance(result, Rejected):
        detail = RejectionResponse(reason=result.reason.name, message=result.message)
        raise HTTPException(status_code=400, detail=detail.model_dump())


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a new game session."""
    await _prune_games()

    if session_id is None or extract_session_id(session_id) is None:
        session_id = await create_session()

    game = _new_game()
    _games[session_id] = game
    await _save_game(session_id, game)

    return {"session_id": session_id}


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    game = await _get_game(session_id)
    return _game_state_response(game)


@router.post("/round")
async def start_new_round(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Shuffle a fresh deck and return to betting."""
    game = await _get_game(session_id)
    _raise_if_rejected(game.start_new_round())
    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/bet")
async def place_bet(
    request: BetRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Add chips to the current bet."""
    game = await _get_game(session_id)
    _raise_if_rejected(game.place_bet(request.amount))
    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/deal")
async def deal(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Deal the opening cards."""
    game = await _get_game(session_id)
    _raise_if_rejected(game.deal())
    await _save_game(session_id, game)
    return _game_state_response(game)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    game = await _get_game(session_id)

    actions = {
        "hit": game.hit,
        "stand": game.stand,
    }

    _raise_if_rejected(actions[request.action]())
    await _save_game(session_id, game)
    return _game_state_response(game)
