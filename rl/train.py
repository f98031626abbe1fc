"""
Training script for the Breakout environment using Stable-Baselines3
Supports PPO, DQN, and SAC algorithms with per-episode metrics tracking.
"""

import os
import argparse
from typing import Dict, List, Optional

from stable_baselines3 import PPO, DQN, SAC
from stable_baselines3.common.vec_env import DummyVecEnv, VecNormalize
from stable_baselines3.common.callbacks import CheckpointCallback, EvalCallback
from stable_baselines3.common.monitor import Monitor

from game.breakout import BreakoutEnv
from rl.configs.breakout_config import (
    ENV_CONFIG, PPO_CONFIG, DQN_CONFIG, SAC_CONFIG, TRAINING_CONFIG, REWARD_CONFIGS,
    EXPERIMENT_CONFIG, get_experiment_matrix,
)
from rl.metrics_callback import MetricsCallback, TensorboardMetricsCallback
from rl.wrappers import MultiDiscreteToBoxWrapper, MultiDiscreteToDiscreteWrapper

ALGORITHMS = {
    "ppo": (PPO, PPO_CONFIG),
    "dqn": (DQN, DQN_CONFIG),
    "sac": (SAC, SAC_CONFIG),
}


def make_env(render_mode: Optional[str] = None, seed: Optional[int] = None,
             reward_config: Optional[Dict] = None,
             wrap_for_sac: bool = False, wrap_for_dqn: bool = False):
    """Factory function to create the environment"""
    def _init():
        env_kwargs = ENV_CONFIG.copy()
        if reward_config:
            env_kwargs["reward_config"] = reward_config
        env = BreakoutEnv(render_mode=render_mode, **env_kwargs)
        if wrap_for_sac:
            env = MultiDiscreteToBoxWrapper(env)
        elif wrap_for_dqn:
            env = MultiDiscreteToDiscreteWrapper(env)
        env = Monitor(env)
        if seed is not None:
            env.reset(seed=seed)
        return env
    return _init


def train_agent(
    algo: str = "ppo",
    total_timesteps: Optional[int] = None,
    n_envs: int = 4,
    reward_name: str = "baseline",
    seed: int = 0,
    save_dir: Optional[str] = None,
    log_dir: Optional[str] = None,
    tensorboard_log: Optional[str] = None,
):
    """Train one agent on the Breakout environment"""
    if algo not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {algo}")
    if reward_name not in REWARD_CONFIGS:
        raise ValueError(f"Unknown reward config: {reward_name}")

    model_cls, algo_config = ALGORITHMS[algo]
    reward_config = REWARD_CONFIGS[reward_name]

    if total_timesteps is None:
        total_timesteps = TRAINING_CONFIG["total_timesteps"]
    save_dir = save_dir or os.path.join(TRAINING_CONFIG["model_dir"], algo)
    log_dir = log_dir or os.path.join(TRAINING_CONFIG["log_dir"], algo)
    tensorboard_log = tensorboard_log or os.path.join(TRAINING_CONFIG["tensorboard_log"], algo)

    os.makedirs(save_dir, exist_ok=True)
    os.makedirs(log_dir, exist_ok=True)

    # Only PPO runs parallel envs; DQN/SAC need flattened/relaxed actions
    if algo != "ppo":
        n_envs = 1
    wrap = {"wrap_for_sac": algo == "sac", "wrap_for_dqn": algo == "dqn"}

    print(f"\n{'='*60}")
    print(f"Training {algo.upper()} for {total_timesteps:,} timesteps...")
    print(f"Reward config: {reward_name}  |  envs: {n_envs}  |  seed: {seed}")
    print(f"{'='*60}\n")

    env = DummyVecEnv([
        make_env(seed=seed + i, reward_config=reward_config, **wrap) for i in range(n_envs)
    ])
    eval_env = DummyVecEnv([make_env(seed=seed + 100, reward_config=reward_config, **wrap)])

    if algo == "ppo":
        env = VecNormalize(env, norm_obs=True, norm_reward=True)
        eval_env = VecNormalize(eval_env, norm_obs=True, norm_reward=False, training=False)

    checkpoint_callback = CheckpointCallback(
        save_freq=max(1, TRAINING_CONFIG["save_freq"] // n_envs),
        save_path=save_dir,
        name_prefix=f"{algo}_breakout",
    )

    eval_callback = EvalCallback(
        eval_env,
        best_model_save_path=save_dir,
        log_path=log_dir,
        eval_freq=max(1, TRAINING_CONFIG.get("eval_freq", 5000) // n_envs),
        n_eval_episodes=EXPERIMENT_CONFIG["n_eval_episodes"],
        deterministic=True,
        render=False,
    )

    metrics_callback = MetricsCallback(
        log_dir=log_dir,
        algo_name=algo,
        verbose=1,
    )

    tb_callback = TensorboardMetricsCallback(verbose=0)

    model = model_cls(
        env=env,
        tensorboard_log=tensorboard_log,
        seed=seed,
        **algo_config
    )

    model.learn(
        total_timesteps=total_timesteps,
        callback=[checkpoint_callback, eval_callback, metrics_callback, tb_callback],
    )

    final_path = os.path.join(save_dir, f"{algo}_breakout_final")
    model.save(final_path)
    if isinstance(env, VecNormalize):
        env.save(os.path.join(save_dir, "vec_normalize.pkl"))

    print(f"\n{'='*60}")
    print(f"{algo.upper()} Training complete! Model saved to {final_path}")
    summary = metrics_callback.get_summary()
    if summary:
        print(f"Mean Reward: {summary['mean_reward']:.2f} ± {summary['std_reward']:.2f}")
        print(f"Mean Score: {summary['mean_score']:.1f}  Mean Stages Cleared: {summary['mean_stages']:.2f}")
        print(f"Total Episodes: {summary['total_episodes']}")
    print(f"{'='*60}\n")

    return model, metrics_callback


def run_experiment_matrix(n_envs: int = 4, seeds: Optional[List[int]] = None):
    """Train every algorithm / reward / length combination once per seed"""
    seeds = seeds if seeds is not None else EXPERIMENT_CONFIG["seeds"]
    experiments = get_experiment_matrix()
    print(f"Running {len(experiments)} experiments x {len(seeds)} seeds")

    results = []
    for i, exp in enumerate(experiments, 1):
        for seed in seeds:
            run_name = f"{exp['name']}_seed{seed}"
            print(f"[{i}/{len(experiments)}] {run_name}")
            _, metrics = train_agent(
                algo=exp["algorithm"],
                total_timesteps=exp["timesteps"],
                n_envs=n_envs,
                reward_name=exp["reward_config"],
                seed=seed,
                save_dir=os.path.join(TRAINING_CONFIG["model_dir"], exp["name"], f"seed_{seed}"),
                log_dir=os.path.join(TRAINING_CONFIG["log_dir"], exp["name"], f"seed_{seed}"),
                tensorboard_log=os.path.join(TRAINING_CONFIG["tensorboard_log"], run_name),
            )
            results.append({"name": run_name, "seed": seed, **metrics.get_summary()})
    return results


def main():
    parser = argparse.ArgumentParser(description="Train RL agent on Breakout")
    parser.add_argument(
        "--algo",
        type=str,
        default="ppo",
        choices=["ppo", "dqn", "sac", "all"],
        help="RL algorithm to use (default: ppo)",
    )
    parser.add_argument(
        "--timesteps",
        type=int,
        default=None,
        help=f"Total timesteps to train (default: {TRAINING_CONFIG['total_timesteps']})",
    )
    parser.add_argument(
        "--n-envs",
        type=int,
        default=4,
        help="Number of parallel environments for PPO (default: 4)",
    )
    parser.add_argument(
        "--reward",
        type=str,
        default="baseline",
        choices=sorted(REWARD_CONFIGS),
        help="Reward shaping config (default: baseline)",
    )
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")

    parser.add_argument(
        "--matrix",
        action="store_true",
        help="Run the full experiment matrix over the configured seeds",
    )

    args = parser.parse_args()

    if args.matrix:
        run_experiment_matrix(n_envs=args.n_envs)
        return

    algos = ["dqn", "ppo", "sac"] if args.algo == "all" else [args.algo]
    if len(algos) > 1:
        print("Training all algorithms sequentially...")
    for algo in algos:
        train_agent(
            algo=algo,
            total_timesteps=args.timesteps,
            n_envs=args.n_envs,
            reward_name=args.reward,
            seed=args.seed,
        )


if __name__ == "__main__":
    main()
