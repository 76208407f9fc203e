from curltrace.config.models import LoggingConfig, TraceConfig

__all__ = ['LoggingConfig', 'TraceConfig']
