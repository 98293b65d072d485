# Alembic autogenerate 가 전체 테이블을 인식하도록 모델을 함께 import 한다.
from campaign_market.models import Base, domain  # noqa: F401
