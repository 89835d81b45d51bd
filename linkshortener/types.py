from typing import Any, TypeAlias


# Type aliases for API Gateway (Lambda proxy) payloads
LambdaEvent: TypeAlias = dict[str, Any]
LambdaContext: TypeAlias = Any
LambdaResponse: TypeAlias = dict[str, Any]

# Type alias for the configuration document (see utils.config)
AppConfig: TypeAlias = dict[str, Any]
