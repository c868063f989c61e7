import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from lootcase.authentication.basic_authentication import BasicAuthentication
from lootcase.broadcaster import (
    CASE_OPENED_EVENT,
    USER_DATA_UPDATED_EVENT,
    OutcomeBroadcaster,
    get_broadcaster,
)
from lootcase.converter import DataConverter
from lootcase.db import Session
from lootcase.exceptions import GameError, InternalError
from lootcase.models.dc_models import (
    OpenCaseModel,
    OpenCaseResponseModel,
    SlotSpinModel,
    UpgradeModel,
)
from lootcase.models.schema_models import UserSchema
from lootcase.services.case_opening import CaseOpener
from lootcase.services.sub_games import (
    SlotGame,
    UpgradeGame,
    get_slot_game,
    get_upgrade_game,
)

games_router = APIRouter(prefix="/games", tags=["games"])
basic_auth = BasicAuthentication(Session)
case_opener = CaseOpener(Session)
data_converter = DataConverter()


def get_case_opener() -> CaseOpener:
    return case_opener


async def emit_user_data_updated(broadcaster: OutcomeBroadcaster, user_id: UUID, payload: dict) -> None:
    # async so BackgroundTasks runs it on the event loop, not in the threadpool
    broadcaster.emit_to_user(user_id, USER_DATA_UPDATED_EVENT, payload)


class GameServer:
    @staticmethod
    @games_router.post("/open-case/{case_id}", response_model=OpenCaseResponseModel)
    async def open_case(
        case_id: UUID,
        open_case_data: OpenCaseModel,
        background_tasks: BackgroundTasks,
        user_data: UserSchema = Depends(basic_auth.check_user_data),
        opener: CaseOpener = Depends(get_case_opener),
        broadcaster: OutcomeBroadcaster = Depends(get_broadcaster),
    ) -> OpenCaseResponseModel:
        """Open one or more cases and return the items won

        Args:
            case_id (UUID): The case to open
            open_case_data (OpenCaseModel): quantity, validated by the settlement
            user_data (UserSchema): The authenticated user

        Returns:
            OpenCaseResponseModel: Items won, in draw order
        """
        try:
            result = await opener.open_cases(user_data.user_id, case_id, open_case_data.quantity)
        except GameError:
            raise
        except Exception:
            logging.exception(f"Failed to open case {case_id} for user {user_data.user_id}")
            raise InternalError()

        case_opened = data_converter.convert_to_case_opened_event(
            result.items, result.user, result.case
        )
        broadcaster.emit_global(CASE_OPENED_EVENT, case_opened.model_dump(mode="json", by_alias=True))

        # Runs once the response has been sent.
        user_data_updated = data_converter.convert_to_user_data_updated_event(result.user)
        background_tasks.add_task(
            emit_user_data_updated,
            broadcaster,
            result.user.user_id,
            user_data_updated.model_dump(mode="json", by_alias=True),
        )
        return OpenCaseResponseModel(items=result.items)

    @staticmethod
    @games_router.post("/upgrade")
    async def upgrade(
        upgrade_data: UpgradeModel,
        user_data: UserSchema = Depends(basic_auth.check_user_data),
        upgrade_game: UpgradeGame = Depends(get_upgrade_game),
    ) -> JSONResponse:
        result = await upgrade_game.upgrade_items(
            user_data.user_id, upgrade_data.selected_item_ids, upgrade_data.target_item_id
        )
        return JSONResponse(status_code=result["status"], content=jsonable_encoder(result))

    @staticmethod
    @games_router.post("/slots")
    async def slots(
        spin_data: SlotSpinModel,
        user_data: UserSchema = Depends(basic_auth.check_user_data),
        slot_game: SlotGame = Depends(get_slot_game),
        broadcaster: OutcomeBroadcaster = Depends(get_broadcaster),
    ):
        try:
            result = await slot_game.spin(user_data.user_id, spin_data.bet_amount, broadcaster)
        except Exception as e:
            logging.error(f"Slot spin failed for user {user_data.user_id}: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": str(e)},
            )
        return jsonable_encoder(result)
