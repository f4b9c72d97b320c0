"""Players endpoints: any authenticated user can list; editors create; admins delete."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roster.api.deps import CurrentClaims, require_role
from roster.core.database import get_db
from roster.core.errors import StorageError
from roster.models import Player
from roster.schemas.auth import AccessTokenClaims
from roster.schemas.player import DeletedResponse, PlayerCreate, PlayerOut

router = APIRouter()

require_editor = require_role({"admin", "manager"})
require_admin = require_role({"admin"})


@router.get("", response_model=list[PlayerOut])
def list_players(
    _claims: CurrentClaims,
    db: Annotated[Session, Depends(get_db)],
) -> list[PlayerOut]:
    """List all players ordered by name."""
    players = db.query(Player).order_by(Player.name).all()
    return [PlayerOut.model_validate(p) for p in players]


@router.post("", response_model=PlayerOut)
def create_player(
    body: PlayerCreate,
    _claims: Annotated[AccessTokenClaims, Depends(require_editor)],
    db: Annotated[Session, Depends(get_db)],
) -> PlayerOut:
    """Add a player (admin or manager)."""
    player = Player(
        name=body.name,
        position=body.position,
        age=body.age,
        goals=body.goals,
    )
    try:
        db.add(player)
        db.commit()
        db.refresh(player)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("player insert failed", cause=e) from e
    return PlayerOut.model_validate(player)


@router.delete("/{player_id}", response_model=DeletedResponse)
def delete_player(
    player_id: int,
    _claims: Annotated[AccessTokenClaims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DeletedResponse:
    """Delete a player (admin only). Deleting an unknown id still returns ok."""
    try:
        db.query(Player).filter(Player.id == player_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("player delete failed", cause=e) from e
    return DeletedResponse(ok=True)
