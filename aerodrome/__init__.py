# aerodrome-lite/aerodrome/__init__.py
import gymnasium
from gymnasium.envs.registration import register

register(
    id='AerodromeEnv-v0',
    entry_point='aerodrome.atc.aerodrome_gym:AerodromeGym',
)
