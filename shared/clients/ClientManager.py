from typing import Generic, TypeVar

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig

T = TypeVar("T", bound=ClientInterface)


class ClientManager(Generic[T]):
    """
    Instantiates the backend client of one client type from configuration.

    The engine is read from "{TYPE}_ENGINE" (e.g. RAG_ENGINE=qdrant) and the
    class "{Type}Client{Engine}" is imported from
    shared.clients.{type}.{engine}.{Type}Client{Engine}.

    Usage::

        rag_client = ClientManager(helper_config, "rag", "RAG").get_client()
    """

    def __init__(self, helper_config: HelperConfig, client_type: str, class_prefix: str):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self._client_type = client_type.lower()
        self._class_prefix = class_prefix
        self.client: T = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        """
        Reads the engine of this client type from ENV configuration.

        Returns:
            str: Capitalised engine name (e.g. "Qdrant").

        Raises:
            ValueError: If no engine is specified in the configuration.
        """
        env_key = f"{self._client_type.upper()}_ENGINE"
        engine = self.helper_config.get_string_val(env_key)
        if not engine:
            raise ValueError(f"No {self._client_type.upper()} engine specified in configuration ({env_key}).")
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> T:
        """
        Imports and instantiates the client class of the configured engine.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"{self._class_prefix}Client{engine}"
        try:
            module = __import__(
                f"shared.clients.{self._client_type}.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported {self._client_type.upper()} engine specified: '{engine}'. Error: {e}")
        client = client_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated %s client for engine: %s", self._client_type.upper(), engine)
        return client

    def get_client(self) -> T:
        """
        Returns the instantiated client.
        """
        return self.client
