from slidegen.agents.assets.asset_agent import AssetAgent

__all__ = ["AssetAgent"]
