from sqlalchemy import Column, Integer, String, Text
from app.db.base_class import AuditMixin, Base

class Product(Base, AuditMixin):
	__tablename__ = "products"

	id = Column(Integer, primary_key=True, index=True)
	name = Column(String(200), nullable=False)
	description = Column(Text, nullable=True)
	price = Column(Integer, nullable=False)  # smallest currency unit
	category = Column(String(64), nullable=False, index=True)
	module = Column(String(16), nullable=False, index=True)  # social, space, read, mall
