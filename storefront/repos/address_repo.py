from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_address(self, user_id: int, address_id: int) -> AddressModel | None:
        stmt = select(AddressModel).where(
            AddressModel.user_id == user_id,
            AddressModel.id == address_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_type(self, user_id: int, address_type: str) -> AddressModel | None:
        stmt = select(AddressModel).where(
            AddressModel.user_id == user_id,
            AddressModel.address_type == address_type,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        return address

    def update(self, address: AddressModel, /, **fields) -> AddressModel:
        for key, value in fields.items():
            setattr(address, key, value)
        self.db.flush()
        return address

    def delete(self, address: AddressModel) -> None:
        self.db.delete(address)
        self.db.flush()
