'''
    ---------------------------------------------------------------------------
    OpenCap processing: example_bounds_predsim.py
    ---------------------------------------------------------------------------
    Copyright 2022 Stanford University and the Authors

    Author(s): Antoine Falisse, Scott Uhlrich

    Licensed under the Apache License, Version 2.0 (the "License"); you may not
    use this file except in compliance with the License. You may obtain a copy
    of the License at http://www.apache.org/licenses/LICENSE-2.0
    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    This example shows how to derive the bounds and scaling factors of a
    predictive simulation of gait from a reference motion. A synthetic
    reference motion is written to the Data folder when no motion file is
    found there; replace it with the inverse kinematics of your own trial.
'''

# %% User-defined variables.
# Target forward velocity (m/s); above 1.33 m/s running bounds are used.
targetSpeed = 1.33
# Initial guess of the pelvis height (m).
pelvisHeight = 0.9
# 'active' for torque-actuated mtp joints.
mtpType = 'passive'
# Cutoff frequency (Hz) of the filter applied to the reference motion.
filterFrequency = 6
plotBounds = True

# %% Directories, paths, and imports. You should not need to change anything.
import os
import sys
baseDir = os.path.join(os.getcwd(), '..')
sys.path.append(baseDir)
import numpy as np

from boundsPredSim import getBounds, summarizeBounds
from modelInfoPredSim import (model_info, get_default_joints,
                              get_default_muscles)
from settingsPredSim import get_setup
from utils import numpy_to_storage, setup_logging

dataFolder = os.path.join(os.getcwd(), '..', 'Data')
os.makedirs(dataFolder, exist_ok=True)
motionFile = 'reference_gait.mot'
setup_logging()

# %% Model.
joints = get_default_joints(withMTP=True, withArms=True)
model = model_info(joints, get_default_muscles())

# %% Reference motion.
pathMotion = os.path.join(dataFolder, motionFile)
if not os.path.exists(pathMotion):
    time = np.linspace(0, 1.1, 111)
    data = np.zeros((time.shape[0], len(joints) + 1))
    data[:, 0] = time
    for count, joint in enumerate(joints):
        if joint == 'pelvis_tx':
            data[:, count + 1] = targetSpeed * time
        elif joint == 'pelvis_ty':
            data[:, count + 1] = pelvisHeight + 0.02 * np.sin(
                4 * np.pi * time)
        else:
            # Angles in degrees.
            amplitude = 5 + count % 7 * 5
            data[:, count + 1] = 10 + amplitude * np.sin(
                2 * np.pi * time + count)
    numpy_to_storage(['time'] + joints, data, pathMotion, datatype='IK')

# %% Bounds.
settings = get_setup(
    subject={'folder_name': dataFolder, 'IKfile_bounds': motionFile,
             'IG_PelvisY': pelvisHeight, 'vPelvis_x_trgt': targetSpeed,
             'mtp_type': mtpType},
    bounds={'filter_frequency': filterFrequency})
bounds, scaling = getBounds(settings, model)
summary = summarizeBounds(bounds, scaling)
print(summary.to_string())

# %% Plots.
if plotBounds:
    from kinematicsPredSim import getIKFromSettings
    from utilsPlotting import plot_bounds
    Qs = getIKFromSettings(settings, model)
    plot_bounds(Qs, bounds, scaling, group='Qs')
