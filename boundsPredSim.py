'''
    ---------------------------------------------------------------------------
    OpenCap processing: boundsPredSim.py
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

    This script provides bounds and scaling factors for the design variables
    of the predictive simulations. The bounds on the joint variables are
    informed by experimental data, the bounds on the remaining variables are
    fixed. The bounds are scaled such that the upper/lower bounds cannot be
    larger/smaller than 1/-1.

    Every bound pair is a data frame with two rows, 'lower' and 'upper', and
    one column per variable. Each stage returns new tables and leaves its
    inputs untouched; getBounds chains the stages in the only valid order:
    spline, extrema, extension, manual adjustments, actuator bounds, scaling,
    and assembly of the state vector.
'''

import logging
from collections.abc import Mapping
import numpy as np
import pandas as pd
import scipy.interpolate as interpolate

from errorsPredSim import ConfigurationMismatch, DegenerateRange, InvalidBounds
from kinematicsPredSim import checkKinematics, getIKFromSettings

boundIndex = ['lower', 'upper']

# Target forward velocity (m/s) above which running bounds are used.
runningSpeedThreshold = 1.33

# Fixed scaling factors.
fixedScaling = {
    # Torque actuators.
    'ArmTau': 150,
    'LumbarTau': 150,
    'MtpTau': 100,
    # Time derivative of muscle activations.
    'vA': 100,
    # Time derivative of muscle-tendon forces.
    'dFTtilde': 100,
    # Activations and excitations, not normalized.
    'a': 1,
    'a_a': 1,
    'e_a': 1}

# Groups with scaling factors derived from their bounds.
dataScaledGroups = ['Qs', 'Qdots', 'Qdotdots', 'FTtilde']

def boundPair(lower, upper, columns):

    return pd.DataFrame([list(lower), list(upper)], index=boundIndex,
                        columns=list(columns), dtype=float)

def constantBoundPair(lower, upper, columns):

    return boundPair([lower] * len(columns), [upper] * len(columns), columns)

def copyTable(table):

    return {group: table[group].copy() for group in table}

class readOnlyTable(Mapping):
    """Mapping from group name to bound pair or scaling factor. Data frames
    and series are returned as copies, such that changes made by the caller
    never reach the table.
    """

    def __init__(self, table):
        self._table = {}
        for group in table:
            item = table[group]
            if isinstance(item, (pd.DataFrame, pd.Series)):
                item = item.copy()
            self._table[group] = item

    def __getitem__(self, group):
        item = self._table[group]
        if isinstance(item, (pd.DataFrame, pd.Series)):
            return item.copy()
        return item

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

# %% Spline approximation of Qs to get Qdots and Qdotdots.
def splineQs(Qs, joints):

    checkKinematics(Qs, joints)
    time = Qs['time'].to_numpy(dtype=float)
    Qs_spline = pd.DataFrame(data=time, columns=['time'])
    Qdots_spline = pd.DataFrame(data=time, columns=['time'])
    Qdotdots_spline = pd.DataFrame(data=time, columns=['time'])
    for count, joint in enumerate(joints):
        spline = interpolate.InterpolatedUnivariateSpline(
            time, Qs[joint].to_numpy(dtype=float), k=3)
        Qs_spline.insert(count + 1, joint, spline(time))
        splineD1 = spline.derivative(n=1)
        Qdots_spline.insert(count + 1, joint, splineD1(time))
        splineD2 = spline.derivative(n=2)
        Qdotdots_spline.insert(count + 1, joint, splineD2(time))

    return Qs_spline, Qdots_spline, Qdotdots_spline

# %% Extreme values of the splined kinematics.
def getExtrema(Qs_spline, Qdots_spline, Qdotdots_spline, joints):

    bounds = {}
    for group, data in zip(['Qs', 'Qdots', 'Qdotdots'],
                           [Qs_spline, Qdots_spline, Qdotdots_spline]):
        bounds[group] = boundPair(data[joints].min(axis=0).to_numpy(),
                                  data[joints].max(axis=0).to_numpy(), joints)

    return bounds

# %% Extend the bounds.
# The position bounds of the floating base, legs, torso, elbows, and shoulder
# flexion are extended by twice the range between upper and lower bounds. The
# other position bounds keep the extreme values of the data. The velocity and
# acceleration bounds of all coordinates are extended by three times their
# range.
def getExtendedJoints(model_info):

    joints = []
    for group in ['floating_base', 'leg_r', 'leg_l', 'torso', 'elbow',
                  'shoulder_flex']:
        joints += [joint for joint in model_info.getGroup(group)
                   if joint not in joints]

    return joints

def extendBounds(bounds, model_info):

    extended = copyTable(bounds)
    for group, joints, factor in [
            ('Qs', getExtendedJoints(model_info), 2),
            ('Qdots', model_info.joints, 3),
            ('Qdotdots', model_info.joints, 3)]:
        lower = bounds[group].loc['lower', joints].to_numpy()
        upper = bounds[group].loc['upper', joints].to_numpy()
        r = np.abs(upper - lower)
        extended[group].loc['lower', joints] = lower - factor * r
        extended[group].loc['upper', joints] = upper + factor * r

    return extended

# %% Manual adjustments.
def applyManualBounds(bounds, model_info, settings):

    adjusted = copyTable(bounds)
    Qs = adjusted['Qs']
    Qdots = adjusted['Qdots']
    Qdotdots = adjusted['Qdotdots']
    floating_base = model_info.floating_base

    # Forward translation of the floating base.
    Qs.loc['lower', floating_base['tx']] = 0
    Qs.loc['upper', floating_base['tx']] = 2
    # Vertical translation, pinned at the initial pelvis height.
    pelvis_ty = settings['subject']['IG_PelvisY'] * 1.2
    Qs.loc['lower', floating_base['ty']] = pelvis_ty
    Qs.loc['upper', floating_base['ty']] = pelvis_ty
    # Lateral translation.
    Qs.loc['lower', floating_base['tz']] = -0.1
    Qs.loc['upper', floating_base['tz']] = 0.1
    # No elbow hyperextension.
    elbow = model_info.getGroup('elbow')
    if elbow:
        Qs.loc['lower', elbow] = 0
    # The mtp kinematics are not informative.
    mtp = model_info.getGroup('mtp')
    if mtp:
        Qs.loc['lower', mtp] = -0.5
        Qs.loc['upper', mtp] = 1.05
        Qdots.loc['lower', mtp] = -13
        Qdots.loc['upper', mtp] = 13
        Qdotdots.loc['lower', mtp] = -500
        Qdotdots.loc['upper', mtp] = 500

    # Running motions need a larger envelope than the reference trial.
    if settings['subject']['vPelvis_x_trgt'] > runningSpeedThreshold:
        logging.info('Target speed of {}m/s, using running bounds.'.format(
            settings['subject']['vPelvis_x_trgt']))
        Qs.loc['lower', floating_base['tilt']] = -20 * np.pi / 180
        shoulder_flex = model_info.getGroup('shoulder_flex')
        if shoulder_flex:
            Qs.loc['lower', shoulder_flex] = -50 * np.pi / 180
        Qdots.loc['upper', floating_base['tx']] = 4

    return adjusted

# %% Bounds independent of the reference trial.
def getActuatorBounds(model_info, settings):

    bounds = {}
    muscles = model_info.muscles
    settingsBounds = settings['bounds']

    # Muscle activations.
    bounds['a'] = constantBoundPair(settingsBounds['lb_activation'], 1,
                                    muscles)
    # Muscle-tendon forces.
    bounds['FTtilde'] = constantBoundPair(0, 5, muscles)
    # Time derivative of muscle activations. Activation is faster than
    # deactivation. The bounds include the fixed scaling of 100.
    activationTimeConstant = settingsBounds['activationTimeConstant']
    deactivationTimeConstant = settingsBounds['deactivationTimeConstant']
    bounds['vA'] = constantBoundPair(
        -1 / (fixedScaling['vA'] * deactivationTimeConstant),
        1 / (fixedScaling['vA'] * activationTimeConstant), muscles)
    # Time derivative of muscle-tendon forces.
    bounds['dFTtilde'] = constantBoundPair(-1, 1, muscles)

    # Arm activations and excitations.
    armJoints = model_info.armJoints
    bounds['a_a'] = constantBoundPair(-1, 1, armJoints)
    bounds['e_a'] = constantBoundPair(-1, 1, armJoints)

    # Mtp activations and excitations.
    if settings['subject']['mtp_type'] == 'active':
        mtpJoints = model_info.getGroup('mtp')
        if not mtpJoints:
            raise ConfigurationMismatch(
                'Active mtp joints requested but no mtp coordinates in the '
                'model.')
        bounds['a_mtp'] = constantBoundPair(-1, 1, mtpJoints)
        bounds['e_mtp'] = constantBoundPair(-1, 1, mtpJoints)

    # Lumbar activations and excitations, only used when no muscles actuate
    # the lumbar joints (e.g. Rajagopal model).
    if settingsBounds['withLumbarCoordinateActuators']:
        lumbarJoints = model_info.getGroup('torso')
        bounds['a_lumbar'] = constantBoundPair(-1, 1, lumbarJoints)
        bounds['e_lumbar'] = constantBoundPair(-1, 1, lumbarJoints)

    # Final time.
    bounds['tf'] = constantBoundPair(0.1, 1, ['tf'])

    return bounds

# %% Scaling.
# Bounds at zero on both sides have no meaningful scaling factor. They get a
# unit scaling factor and normalized bounds of zero, unless strict.
def scaleBoundPair(bound, group='', strict=False):

    s = bound.abs().max(axis=0)
    degenerate = list(s.index[(s == 0).to_numpy()])
    if degenerate:
        if strict:
            raise DegenerateRange(
                'Bounds of {} are zero for: {}'.format(
                    group, ', '.join(degenerate)))
        logging.warning('Bounds of {} are zero for {}, using unit '
                        'scaling.'.format(group, ', '.join(degenerate)))
        s[degenerate] = 1.

    return s, bound.div(s, axis=1)

def scaleBounds(bounds, strict=False):

    scaled = copyTable(bounds)
    scaling = {}
    for group in dataScaledGroups:
        if group in bounds:
            scaling[group], scaled[group] = scaleBoundPair(
                bounds[group], group=group, strict=strict)
    for group in fixedScaling:
        scaling[group] = fixedScaling[group]

    return scaled, scaling

def unscaleBoundPair(bound, scale):

    return bound.mul(scale, axis=1) if isinstance(scale, pd.Series) else (
        bound * scale)

# %% Qs and Qdots are intertwined.
def getStateNames(joints):

    names = []
    for joint in joints:
        names += [joint + '_value', joint + '_speed']

    return names

def assembleQsQdots(bounds, scaling, model_info):

    assembled = copyTable(bounds)
    assembledScaling = dict(scaling)
    joints = model_info.joints
    names = getStateNames(joints)

    data, s = {}, {}
    for joint in joints:
        data[joint + '_value'] = bounds['Qs'][joint].to_numpy()
        data[joint + '_speed'] = bounds['Qdots'][joint].to_numpy()
        s[joint + '_value'] = scaling['Qs'][joint]
        s[joint + '_speed'] = scaling['Qdots'][joint]
    assembled['QsQdots'] = pd.DataFrame(data, index=boundIndex,
                                        columns=names, dtype=float)
    assembledScaling['QsQdots'] = pd.Series(s, index=names, dtype=float)

    # Initial position of the forward translation imposed to be 0.
    assembled['QsQdots_0'] = assembled['QsQdots'].copy()
    assembled['QsQdots_0'].loc[
        :, model_info.floating_base['tx'] + '_value'] = 0
    assembledScaling['QsQdots_0'] = assembledScaling['QsQdots'].copy()

    return assembled, assembledScaling

# %% Verify lower bounds do not exceed upper bounds.
def verifyBounds(bounds, stage):

    for group in bounds:
        bound = bounds[group]
        inverted = bound.columns[
            (bound.loc['lower'] > bound.loc['upper']).to_numpy()]
        if len(inverted):
            raise InvalidBounds(
                'Lower bound above upper bound after {} for {}: {}'.format(
                    stage, group, ', '.join(inverted)))

# %% Bounds and scaling factors.
def getBounds(settings, model_info, Qs=None):
    """Returns read-only mappings from group name to bound pair and from
    group name to scaling factor. The reference kinematics are loaded from
    the settings when Qs is not provided.
    """

    if Qs is None:
        Qs = getIKFromSettings(settings, model_info)

    Qs_spline, Qdots_spline, Qdotdots_spline = splineQs(Qs, model_info.joints)
    bounds = getExtrema(Qs_spline, Qdots_spline, Qdotdots_spline,
                        model_info.joints)
    verifyBounds(bounds, 'extraction')
    bounds = extendBounds(bounds, model_info)
    verifyBounds(bounds, 'extension')
    bounds = applyManualBounds(bounds, model_info, settings)
    verifyBounds(bounds, 'manual adjustments')
    bounds = {**bounds, **getActuatorBounds(model_info, settings)}
    verifyBounds(bounds, 'actuator bounds')
    bounds, scaling = scaleBounds(
        bounds, strict=settings['bounds']['strict_scaling'])
    verifyBounds(bounds, 'scaling')
    bounds, scaling = assembleQsQdots(bounds, scaling, model_info)
    verifyBounds(bounds, 'assembly')

    return readOnlyTable(bounds), readOnlyTable(scaling)

# %% Summary of the bounds and scaling factors.
def summarizeBounds(bounds, scaling):

    rows = []
    for group in bounds:
        scale = scaling.get(group, np.nan)
        for variable in bounds[group].columns:
            if isinstance(scale, pd.Series):
                c_scale = scale[variable]
            else:
                c_scale = scale
            rows.append([group, variable,
                         bounds[group].loc['lower', variable],
                         bounds[group].loc['upper', variable], c_scale])

    return pd.DataFrame(rows, columns=['group', 'variable', 'lower', 'upper',
                                       'scaling'])
