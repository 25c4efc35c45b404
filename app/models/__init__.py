# Roommate Parking Board — Local Database Models
# Import all models here for SQLAlchemy discovery

from app.models.local_setting import LocalSetting     # noqa
