from dependency_injector import containers, providers

from app.core.settings import Settings
from app.core.security.captcha import TurnstileVerifier
from app.core.security.rate_limit import RateLimiter
from app.storage.content_store import ContentStoreClient
from app.v1_0.helper import IdentifierGenerator, MimeClassifier
from app.v1_0.services import FileService, UploadService


class APIContainer(containers.DeclarativeContainer):
    settings = providers.Dependency(instance_of=Settings)

    content_store = providers.Singleton(ContentStoreClient, settings=settings)
    mime_classifier = providers.Singleton(
        MimeClassifier,
        category_types=settings.provided.CATEGORY_TYPES,
        default=settings.provided.DEFAULT_CATEGORY,
        fallback=settings.provided.FALLBACK_CATEGORY,
    )
    id_generator = providers.Singleton(
        IdentifierGenerator,
        min_length=settings.provided.ID_MIN_LENGTH,
        max_length=settings.provided.ID_MAX_LENGTH,
    )
    captcha_verifier = providers.Singleton(TurnstileVerifier, settings=settings)
    rate_limiter = providers.Singleton(RateLimiter, settings=settings)

    upload_service = providers.Singleton(
        UploadService,
        settings=settings,
        store=content_store,
        classifier=mime_classifier,
        id_generator=id_generator,
    )
    file_service = providers.Singleton(
        FileService,
        settings=settings,
        store=content_store,
    )
