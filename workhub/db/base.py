from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Models register themselves by importing Base from here; workhub.db.models
# imports every model module, so import that package before create_all().
