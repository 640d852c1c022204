from dependency_injector import containers, providers
from app.core.settings import Settings
from app.v1_0.v1_containers import APIContainer

class ApplicationContainer(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
                "app.v1_0.routers.upload_router",
                "app.v1_0.routers.file_router",
            ]
    )
    settings = providers.Dependency(instance_of=Settings)

    api_container = providers.Container(
        APIContainer,
        settings=settings,
    )
