from preservica_client.infrastructure.secrets.aws import AwsSecretsManagerStore, parse_secret
from preservica_client.infrastructure.secrets.caching import CachingSecretStore

__all__ = ["AwsSecretsManagerStore", "CachingSecretStore", "parse_secret"]
