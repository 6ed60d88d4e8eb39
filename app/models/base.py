from sqlalchemy.orm import declarative_base


# Base for SQLAlchemy declarative models
Base = declarative_base()
