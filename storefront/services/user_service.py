from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.cart import CartModel
from storefront.data.models.user import UserModel
from storefront.domain.errors import DuplicateUser, UserNotFound
from storefront.domain.schemas import UserCreate, UserRead, UserUpdate
from storefront.repos.cart_repo import CartRepo
from storefront.repos.user_repo import UserRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepo(db)
        self.cart_repo = CartRepo(db)

    def create_user(self, payload: UserCreate) -> UserRead:
        """Registration: the user and an empty cart, created together."""
        with atomic(self.db):
            if self.repo.get_by_email(payload.email):
                raise DuplicateUser("User with that email address already exists")

            user = self.repo.create_user(
                UserModel(first_name=payload.first_name, last_name=payload.last_name, email=payload.email)
            )
            self.cart_repo.create_cart(CartModel(user_id=user.id))

        logger.info(f"User {user.id} registered")
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        return UserRead.model_validate(self._require(user_id))

    def update_user(self, user_id: int, payload: UserUpdate) -> UserRead:
        fields = payload.model_dump(exclude_none=True)

        with atomic(self.db):
            user = self._require(user_id)

            email = fields.get("email")
            if email and email != user.email and self.repo.get_by_email(email):
                raise DuplicateUser("User with that email address already exists")

            self.repo.update_user(user, **fields)

        logger.info(f"User {user_id} updated: {sorted(fields)}")
        return UserRead.model_validate(user)

    def delete_user(self, user_id: int) -> None:
        """
        Account deletion. Cart, checkout session, address book, card and
        order history go with the user.
        """
        with atomic(self.db):
            user = self._require(user_id)
            self.repo.delete_user(user)

        logger.info(f"User {user_id} deleted")

    def _require(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise UserNotFound("User not found")
        return user
