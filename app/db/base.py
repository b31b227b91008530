from sqlalchemy.orm import DeclarativeBase

# Largest value an INTEGER column (ids, prices, quantities) can hold
MAX_DB_INT = 2_147_483_647


class Base(DeclarativeBase):
    pass
