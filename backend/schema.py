from sqlalchemy import Column, Integer, String, Numeric
from base import Base


class Product(Base):
    __tablename__ = 'products'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String)
    price = Column(Numeric(12, 2, asdecimal=True), nullable=False)

    def __repr__(self):
        return f"<Product id={self.id} name={self.name!r} price={self.price}>"
