import time

import numpy as np
from rich.progress import track

from utils.log_stuff import human_readable_time, log_episode_stuff


def random_policy(env, obs):
    return env.action_space.sample()


def idle_policy(env, obs):
    """Never issues a command: the first selector bin of every slot."""
    return -np.ones(env.action_space.shape, dtype=np.float32)


POLICIES = {
    'random': random_policy,
    'idle': idle_policy,
}


def run_episode(env, policy, max_steps, render=False, no_progress_bar=True, seed=None):
    """
    Runs one episode of decision rounds.

    Returns:
        (total_reward, info of the last step)
    """
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    steps = range(max_steps)
    if not no_progress_bar:
        steps = track(steps, description="Decision rounds", total=max_steps)
    for _ in steps:
        obs, reward, terminated, truncated, info = env.step(policy(env, obs))
        total_reward += reward
        if render:
            env.render()
        if terminated or truncated:
            break
    return total_reward, info


def run_episodes(env, policy, args, logger, events_log_path_csv=None, episodes_log_path_csv=None, flog_path=None,
                 plotter=None):
    results = []
    for ep in range(args.episodes):
        try:
            logger.info(f"Episode {ep+1}/{args.episodes} started.")
            start_time = time.time()
            seed = None if args.seed is None else args.seed + ep
            total_reward, info = run_episode(env, policy, args.steps, render=args.render,
                                             no_progress_bar=args.no_progress_bar, seed=seed)
            end_time = time.time()
            logger.info(f"Episode {ep+1}/{args.episodes} completed in {human_readable_time(end_time - start_time)}: "
                        f"reward {total_reward:.1f}, {info['landings']} landings, {info['collisions']} collisions, "
                        f"{info['game_time']:.0f}s simulated.")

            log_episode_stuff(args.log_csv, args.log_file, ep+1, total_reward, info, episodes_log_path_csv,
                              flog_path)
            if plotter is not None:
                plotter.update(ep+1, info)
                plotter.save(args.outdir)
            results.append((total_reward, info))

        except KeyboardInterrupt:
            logger.info("Session interrupted by user.")
            break

    if results:
        rewards = np.array([r for r, _ in results])
        logger.info(f"Avg Reward: {rewards.mean():.2f}, Landings: {sum(i['landings'] for _, i in results)}, "
                    f"Collisions: {sum(i['collisions'] for _, i in results)}")
    return results
