"""
Training configuration for the Breakout environment
Experiment configurations with multiple reward shaping settings
"""

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # Don't render during training - it's too slow with parallel envs
    "width": 480,
    "height": 640,
    "dt": 1/60,
    "frame_skip": 2,
    "max_steps": 5400,  # 3 minutes of play
    "lives": 3,
    "launch_jitter_deg": 10.0,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# ==============================================================================

# Reward Config 1: BASELINE (balanced)
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced brick / survival reward shaping",
    "R_BRICK_HIT": 0.5,      # Any brick hit
    "R_BRICK_DESTROY": 1.0,  # Extra for destroying a brick
    "R_PADDLE": 0.1,         # Returning the ball
    "R_STAGE": 5.0,          # Clearing a stage
    "R_LIFE": 2.0,           # Penalty per lost life
    "R_TIME": 0.001,         # Small time penalty
    "R_GAME_OVER": 5.0,      # Losing the last life
}

# Reward Config 2: RALLY (keep the ball alive)
REWARD_CONFIG_RALLY = {
    "name": "rally",
    "description": "Prioritize returning the ball - higher paddle reward and life penalty",
    "R_BRICK_HIT": 0.2,
    "R_BRICK_DESTROY": 0.5,
    "R_PADDLE": 0.5,         # MUCH higher paddle reward
    "R_STAGE": 3.0,
    "R_LIFE": 5.0,           # MUCH higher life penalty
    "R_TIME": 0.0,           # Survival is not penalized
    "R_GAME_OVER": 10.0,
}

# Reward Config 3: AGGRESSIVE (clear bricks fast)
REWARD_CONFIG_AGGRESSIVE = {
    "name": "aggressive",
    "description": "Prioritize clearing bricks - higher brick rewards, higher time cost",
    "R_BRICK_HIT": 1.0,
    "R_BRICK_DESTROY": 2.0,
    "R_PADDLE": 0.05,
    "R_STAGE": 10.0,
    "R_LIFE": 1.0,
    "R_TIME": 0.005,         # Higher time penalty - encourage action
    "R_GAME_OVER": 3.0,
}

REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "rally": REWARD_CONFIG_RALLY,
    "aggressive": REWARD_CONFIG_AGGRESSIVE,
}

# ==============================================================================
# TIMESTEP CONFIGURATIONS
# ==============================================================================

TIMESTEP_CONFIGS = {
    "short": 50_000,
    "medium": 500_000,
    "long": 2_000_000,
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 2048,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# SAC runs on a continuous relaxation of the action space
SAC_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 256,
    "tau": 0.005,
    "gamma": 0.99,
    "train_freq": 1,
    "gradient_steps": 1,
    "ent_coef": "auto",
    "target_entropy": "auto",
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}

EXPERIMENT_CONFIG = {
    "seeds": [42, 123, 456],
    "n_eval_episodes": 10,
    "algorithms": ["dqn", "ppo", "sac"],
    "reward_configs": ["baseline", "rally", "aggressive"],
    "timestep_configs": ["short", "medium", "long"],
}


def get_experiment_matrix():
    """
    Generate all experiment configurations.
    Returns list of dicts with: name, algorithm, reward_config, reward_params, timestep_config, timesteps
    """
    experiments = []

    for reward_name in EXPERIMENT_CONFIG["reward_configs"]:
        for timestep_name in EXPERIMENT_CONFIG["timestep_configs"]:
            for algo in EXPERIMENT_CONFIG["algorithms"]:
                exp_name = f"{algo}_{reward_name}_{timestep_name}"
                experiments.append({
                    "name": exp_name,
                    "algorithm": algo,
                    "reward_config": reward_name,
                    "reward_params": REWARD_CONFIGS[reward_name],
                    "timestep_config": timestep_name,
                    "timesteps": TIMESTEP_CONFIGS[timestep_name],
                })

    return experiments


if __name__ == "__main__":
    experiments = get_experiment_matrix()
    print(f"Total experiments: {len(experiments)}")
    print("\nExperiment Matrix:")
    print("-" * 70)
    for exp in experiments:
        print(f"  {exp['name']:35} | {exp['timesteps']:>10,} steps")
    print("-" * 70)

    total_steps = sum(exp['timesteps'] for exp in experiments)
    print(f"\nTotal timesteps across all experiments: {total_steps:,}")
    print(f"Estimated time (at ~1000 steps/sec): {total_steps / 1000 / 3600:.1f} hours")
