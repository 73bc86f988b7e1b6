'''
    ---------------------------------------------------------------------------
    OpenCap processing: utilsPlotting.py
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
'''

import numpy as np
import matplotlib.pyplot as plt

from boundsPredSim import unscaleBoundPair

# %% Plot trajectories against their (unscaled) bounds.
# data is a data frame with a time column and one column per variable, e.g.,
# the reference kinematics for group 'Qs' or splined velocities for 'Qdots'.
def plot_bounds(data, bounds, scaling, group='Qs', variables=None,
                title=None, show=True):

    bound = unscaleBoundPair(bounds[group], scaling[group])
    if variables is None:
        variables = [c for c in bound.columns if c in data.columns]
    ny = int(np.ceil(np.sqrt(len(variables))))
    fig, axs = plt.subplots(ny, ny, sharex=True, squeeze=False)
    fig.suptitle(title if title is not None else group)
    x = data['time'].to_numpy()
    for i, ax in enumerate(axs.flat):
        if i < len(variables):
            variable = variables[i]
            ax.plot(x, data[variable].to_numpy(), 'k')
            ax.hlines(bound.loc['lower', variable], x[0], x[-1], 'r')
            ax.hlines(bound.loc['upper', variable], x[0], x[-1], 'b')
            ax.set_title(variable)
        else:
            ax.set_visible(False)
    if show:
        plt.show()

    return fig
