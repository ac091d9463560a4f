from slidegen.config.settings import Config, get_config, get_model_config, get_pipeline_config

__all__ = ["Config", "get_config", "get_model_config", "get_pipeline_config"]
