from lootcase.domain.leveling import xp_for_level
from lootcase.models.dc_models import (
    CaseOpenedEventModel,
    UserDataUpdatedEventModel,
    UserProfileModel,
    WinnerUserModel,
)
from lootcase.models.schema_models import CaseSchema, ItemSchema, UserSchema


class DataConverter:
    """This class is used to convert data between different formats."""

    def convert_to_case_opened_event(
        self, items: list[ItemSchema], user: UserSchema, case_data: CaseSchema
    ) -> CaseOpenedEventModel:
        """Build the public spectator event for one opening

        Args:
            items (list[ItemSchema]): Items won, in draw order
            user (UserSchema): The winner; only name, id and avatar are exposed
            case_data (CaseSchema): The opened case

        Returns:
            CaseOpenedEventModel: Payload of the global caseOpened event
        """
        return CaseOpenedEventModel(
            winning_items=items,
            user=WinnerUserModel(
                name=user.username,
                id=user.user_id,
                profile_picture=user.profile_picture,
            ),
            case_image=case_data.image,
        )

    def convert_to_user_data_updated_event(self, user: UserSchema) -> UserDataUpdatedEventModel:
        return UserDataUpdatedEventModel(
            wallet_balance=user.wallet_balance,
            xp=user.xp,
            level=user.level,
        )

    def convert_userschema_to_profile(self, user: UserSchema) -> UserProfileModel:
        return UserProfileModel(
            user_id=user.user_id,
            username=user.username,
            profile_picture=user.profile_picture,
            wallet_balance=user.wallet_balance,
            xp=user.xp,
            level=user.level,
            xp_for_next_level=xp_for_level(user.level + 1),
        )
