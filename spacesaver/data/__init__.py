from spacesaver.data.frame import RankFrame, to_dataframe

__all__ = ["RankFrame", "to_dataframe"]
