from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from ..core.config import settings


class MigrationSetupError(RuntimeError):
    """자격 증명 누락, 연결 실패 등 레코드 처리 전에 발생하는 치명적 오류"""


class MongoConnectionManager:
    client: AsyncIOMotorClient | None = None

    @classmethod
    def get_client(cls) -> AsyncIOMotorClient:
        if cls.client is None:
            if not settings.mongodb_uri:
                raise MigrationSetupError(
                    "MongoDB 접속 정보가 없습니다. MONGODB_URI 환경 변수 또는 --mongodb-uri 옵션을 지정하세요."
                )
            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
            )
        return cls.client

    @classmethod
    def get_database(cls) -> AsyncIOMotorDatabase:
        return cls.get_client()[settings.mongodb_db]

    @classmethod
    def get_visits_collection(cls) -> AsyncIOMotorCollection:
        return cls.get_database()[settings.visits_collection]

    @classmethod
    async def check_connection(cls) -> None:
        """ping과 단건 조회로 접속 및 읽기 권한을 확인"""
        try:
            await cls.get_client().admin.command("ping")
            await cls.get_visits_collection().find_one({}, projection={"_id": 1})
        except PyMongoError as exc:
            raise MigrationSetupError(f"MongoDB 연결 실패: {exc}") from exc

    @classmethod
    async def close(cls) -> None:
        if cls.client:
            cls.client.close()
            cls.client = None
