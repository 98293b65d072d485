from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from campaign_market.core.config import settings


def build_engine(database_url: str) -> Engine:
    if database_url.startswith("sqlite"):
        # 로컬 개발/테스트용 SQLite는 커넥션 풀 옵션을 지원하지 않는다.
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,               # 연결이 죽었는지 자동 체크
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


# 엔진 생성
engine = build_engine(settings.database_url)

# 세션 팩토리
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# 의존성 주입 함수
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
