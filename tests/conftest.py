import numpy as np
import pandas as pd
import pytest

from modelInfoPredSim import model_info, get_default_joints
from settingsPredSim import get_setup

MUSCLES = ['glmax1_l', 'soleus_l', 'glmax1_r', 'soleus_r']


def _kinematics(joints, seed=0, speed=1.2, n=101, duration=1.0):
    # Offsets and amplitudes keep every angle within [-0.1, 1.3] rad.
    rng = np.random.default_rng(seed)
    time = np.linspace(0, duration, n)
    Qs = pd.DataFrame(data=time, columns=['time'])
    for count, joint in enumerate(joints):
        if joint == 'pelvis_tx':
            values = speed * time
        elif joint == 'pelvis_ty':
            values = 0.9 + 0.02 * np.sin(4 * np.pi * time)
        elif joint == 'pelvis_tz':
            values = 0.01 * np.sin(2 * np.pi * time)
        else:
            offset = rng.uniform(0.2, 1.0)
            amplitude = rng.uniform(0.05, 0.3)
            frequency = rng.uniform(0.8, 2.0)
            phase = rng.uniform(0, 2 * np.pi)
            values = offset + amplitude * np.sin(
                2 * np.pi * frequency * time + phase)
        Qs.insert(count + 1, joint, values)
    return Qs


@pytest.fixture
def joints():
    return get_default_joints(withMTP=True, withArms=True)


@pytest.fixture
def model(joints):
    return model_info(joints, MUSCLES)


@pytest.fixture
def make_kinematics():
    return _kinematics


@pytest.fixture
def make_settings():
    def _settings(speed=1.2, mtp_type='passive', **bounds):
        return get_setup(
            subject={'IG_PelvisY': 0.9, 'vPelvis_x_trgt': speed,
                     'mtp_type': mtp_type},
            bounds=bounds)
    return _settings
