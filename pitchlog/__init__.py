"""
PitchLog: match analytics for a single logged football player.
"""
