import os
import os.path
from configparser import ConfigParser, NoSectionError, NoOptionError

class ConfigError(Exception):
    """Generic configuration error exception, also raised when a carrier
    integration is missing credentials it cannot work without
    """
    pass

class ConfigKeyError(KeyError):
    """Raised when a key is requested from the config but is not found
    """
    pass

class ConfigurationProvider(object):
    """Basic configuration provider interface, other providers should inherit
    from this
    """
    def get_value(self, *keys):
        raise NotImplementedError()

class NullConfig(ConfigurationProvider):
    """Simple placeholder provider, raises ConfigKeyError for all keys
    """
    def get_value(self, *keys):
        raise ConfigKeyError('NullConfig provides no values')

class DotFileConfig(ConfigurationProvider):
    """Reads config values from the ~/.podtrack INI file, or from an
    alternative file if one is given.
    """
    _config = None

    def __init__(self, config_file=None):
        if config_file is None:
            config_file = os.path.expanduser('~/.podtrack')
        if not os.path.exists(config_file):
            raise ConfigError('Config file does not exist: {file}'.format(
                file=config_file))

        self._config = ConfigParser()
        self._config.read([config_file])

    def get_value(self, *keys):
        try:
            return self._config.get(*keys)
        except (NoSectionError, NoOptionError) as err:
            raise ConfigKeyError(err)

class DictConfig(ConfigurationProvider, dict):
    """Simple config provider that acts like a dict
    """
    def get_value(self, *keys):
        node = self
        for key in keys:
            try:
                node = node[key]
            except (KeyError, TypeError) as err:
                raise ConfigKeyError(err)
        if node is None:
            raise ConfigKeyError(keys)
        return node

class EnvConfig(ConfigurationProvider):
    """Pulls values from environment variables.

    Well-known keys use the variable names the deployment already sets
    (FEDEX_API_KEY, USPS_USER_ID, ...); anything else is looked up as
    NAMESPACE_KEY, uppercased. Empty variables count as unset.
    """
    ALIASES = {
        ('FedEx', 'key'):               'FEDEX_API_KEY',
        ('FedEx', 'secret'):            'FEDEX_API_SECRET',
        ('FedEx', 'base_url'):          'FEDEX_API_BASE_URL',
        ('FedEx', 'account_number'):    'FEDEX_ACCOUNT_NUMBER',
        ('USPS', 'userid'):             'USPS_USER_ID',
    }

    def __init__(self, environ=None):
        self._environ = os.environ if environ is None else environ

    def variable_name(self, *keys):
        return self.ALIASES.get(keys, '_'.join(keys).upper())

    def get_value(self, *keys):
        name = self.variable_name(*keys)
        value = self._environ.get(name)
        if not value:
            raise ConfigKeyError(name)
        return value

class ChainConfig(ConfigurationProvider):
    """Asks each provider in turn, the first one that has the key wins
    """
    def __init__(self, *providers):
        self._providers = providers

    def get_value(self, *keys):
        for provider in self._providers:
            try:
                return provider.get_value(*keys)
            except ConfigKeyError:
                continue
        raise ConfigKeyError(keys)
