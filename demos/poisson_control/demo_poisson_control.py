# ---
# jupyter:
#   jupytext:
#     text_representation:
#       extension: .py
#       format_name: light
#       format_version: '1.5'
#       jupytext_version: 1.14.4
# ---

# (demo_poisson_control)=
# # Distributed Control of the Poisson Equation
#
# ## Problem Formulation
#
# In this demo we solve a PDE-constrained optimization problem with two
# general-purpose nonlinear programming solvers and compare them. The problem
# models the control of an elastic membrane $\Omega = (-1, 1)^2$ which is fixed at
# its boundary and reads
#
# $$
# \begin{align}
#     &\min\; J(y,u) = \frac{1}{2} \int_{\Omega} \left( y_d - y \right)^2 \text{ d}x
#     + \frac{\alpha}{2} \int_{\Omega} u^2 \text{ d}x \\
#     &\text{ subject to } \qquad
#     \begin{alignedat}[t]{2}
#         -\Delta y &= h + u \quad &&\text{ in } \Omega,\\
#         y &= 0 \quad &&\text{ on } \partial\Omega,
#     \end{alignedat}
# \end{align}
# $$
#
# where $y_d(x) = -x_1^2$ is the desired deflection, $\alpha = 10^{-2}$, and
# $h(x) = -\sin(\omega x_1) \sin(\omega x_2)$ with $\omega = \pi - \frac{1}{8}$ is an
# external force.
#
# After discretization with finite elements, the state $y$ and the control $u$ are
# collected into a single vector of variables, and the discretized PDE becomes a
# set of equality constraints. The result is a large, sparse nonlinear program.
#
# ## Implementation
#
# ### Initialization
#
# We start by importing pdenlp and loading the config of this demo

# +
import pdenlp

config = pdenlp.load_config("config.ini")
# -

# ### Building the model
#
# The model can be built from scratch with {py:class}`pdenlp.PDENLPModel`. To this
# end, we create a mesh of the domain with {py:func}`pdenlp.regular_box_mesh`

# +
from fenics import *

n = config.getint("Discretization", "n")
mesh, subdomains, boundaries, _, ds, dS = pdenlp.regular_box_mesh(
    n, start_x=-1.0, start_y=-1.0, end_x=1.0, end_y=1.0
)
dx = Measure("dx", mesh, metadata={"quadrature_degree": 1})
# -

# Note that we use a quadrature of degree 1 for all integrals. The state is
# discretized with piecewise quadratic and the control with piecewise linear
# Lagrange elements, and the state satisfies homogeneous Dirichlet boundary
# conditions on all four sides of the square

# +
Y = FunctionSpace(mesh, "CG", 2)
U = FunctionSpace(mesh, "CG", 1)
bcs = pdenlp.create_dirichlet_bcs(Y, Constant(0.0), boundaries, [1, 2, 3, 4])
# -

# The desired state and the force are defined via the spatial coordinates

# +
import numpy as np

x = SpatialCoordinate(mesh)
alpha = 1e-2
omega = np.pi - 1.0 / 8.0
y_d = -x[0] ** 2
h = -sin(omega * x[0]) * sin(omega * x[1])
# -

# The cost functional and the weak form of the PDE are given as python functions
# which return UFL forms. The residual is tested with a test function ``v`` of the
# state space


# +
def cost(y, u):
    return 0.5 * (y_d - y) * (y_d - y) * dx + 0.5 * alpha * u * u * dx


def residual(y, u, v):
    return dot(grad(v), grad(y)) * dx - v * u * dx - v * h * dx


# -

# The vector of variables consists of the degrees of freedom of the state which are
# not fixed by the boundary conditions, followed by the degrees of freedom of the
# control. We start at zero

# +
num_state = pdenlp.number_of_free_dofs(Y, bcs)
x0 = np.zeros(num_state + U.dim())

model = pdenlp.PDENLPModel(
    x0, cost, residual, Y, U, bcs, name="Control elastic membrane"
)
print(model)
# -

# ::::{note}
# The same model is returned by {py:func}`pdenlp.poisson_control_model`, which
# reads all parameters from the ``[Discretization]`` and ``[Problem]`` sections of
# the config.
# ::::
#
# ### Finding a feasible starting point
#
# Before solving the optimization problem, we compute a point which (nearly)
# satisfies the PDE. This is done by solving the nonlinear least-squares problem
# $\min_x \frac{1}{2} \lVert c(x) \rVert^2$, where $c$ denotes the constraints

# +
feasibility = pdenlp.feasibility_solve(model, config=config)
print(
    f"Residual norm: {feasibility.solver_specific['initial_residual_norm']:.3e} -> "
    f"{feasibility.primal_feas:.3e}"
)
# -

# ### Solving the problem
#
# Now, we solve the problem with the interior point method Ipopt and with the
# trust-region SQP method, both starting from the computed point. The evaluation
# counters of the model are reset before each run

# +
tol = config.getfloat("Solvers", "tol")
records = [
    pdenlp.solve(model, solver, x0=feasibility.solution, tol=tol, config=config)
    for solver in ["ipopt", "sqp"]
]
# -

# ### Comparison
#
# Finally, we compare the results of both solvers

# +
comparison = pdenlp.compare(records)
print(comparison.format(precision=3))
print(f"Objectives agree: {pdenlp.check_agreement(records, rtol=1e-2)}")
# -

# The whole workflow of this demo can also be run with a single call to
# {py:func}`pdenlp.run_experiment` or from the command line via
# ``pdenlp-compare config.ini``.
#
# We visualize the solution computed by Ipopt with

# +
import matplotlib.pyplot as plt

y, u = model.state_and_control(records[0].solution)

plt.figure(figsize=(10, 5))

plt.subplot(1, 2, 1)
fig = plot(u)
plt.colorbar(fig, fraction=0.046, pad=0.04)
plt.title("Control variable u")

plt.subplot(1, 2, 2)
fig = plot(y)
plt.colorbar(fig, fraction=0.046, pad=0.04)
plt.title("State variable y")

plt.tight_layout()
# plt.savefig("./img_poisson_control.png", dpi=150, bbox_inches="tight")
# -
