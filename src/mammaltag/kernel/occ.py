"""OpenCascade kernel adapter built on the OCP bindings.

Importing this module without OCP installed does not fail; constructing
`OccKernel` raises `KernelUnavailableError` instead, so the rest of the
package (and its tests) stays importable on hosts without the kernel.
"""

import os
import tempfile
from collections.abc import Iterator, Sequence

import structlog

from mammaltag.domain import ExportFormat
from mammaltag.exceptions import (
    BooleanOperationError,
    ExportError,
    KernelOperationError,
    KernelUnavailableError,
)
from mammaltag.kernel.base import Shape, ShapeKind, Vec3

try:  # pragma: no cover - exercised in environments with OCP
    from OCP.BRep import BRep_Builder, BRep_Tool
    from OCP.BRepAlgoAPI import BRepAlgoAPI_Cut, BRepAlgoAPI_Fuse
    from OCP.BRepBuilderAPI import (
        BRepBuilderAPI_MakeEdge,
        BRepBuilderAPI_MakeFace,
        BRepBuilderAPI_MakeWire,
    )
    from OCP.BRepFilletAPI import BRepFilletAPI_MakeFillet
    from OCP.BRepGProp import BRepGProp
    from OCP.BRepMesh import BRepMesh_IncrementalMesh
    from OCP.BRepPrimAPI import (
        BRepPrimAPI_MakeBox,
        BRepPrimAPI_MakePrism,
        BRepPrimAPI_MakeSphere,
    )
    from OCP.GProp import GProp_GProps
    from OCP.gp import gp_Pnt, gp_Vec
    from OCP.Message import Message_ProgressRange
    from OCP.RWGltf import RWGltf_CafWriter
    from OCP.ShapeFix import ShapeFix_Face
    from OCP.StlAPI import StlAPI_Writer
    from OCP.TCollection import TCollection_AsciiString, TCollection_ExtendedString
    from OCP.TColStd import TColStd_IndexedDataMapOfStringString
    from OCP.TDocStd import TDocStd_Document
    from OCP.TopAbs import TopAbs_EDGE, TopAbs_FACE, TopAbs_REVERSED
    from OCP.TopExp import TopExp_Explorer
    from OCP.TopLoc import TopLoc_Location
    from OCP.TopoDS import TopoDS, TopoDS_Compound
    from OCP.TopTools import TopTools_ListOfShape
    from OCP.XCAFApp import XCAFApp_Application
    from OCP.XCAFDoc import XCAFDoc_DocumentTool

    _OCC_IMPORT_ERROR: ImportError | None = None
except ImportError as exc:  # pragma: no cover - handled during runtime detection
    _OCC_IMPORT_ERROR = exc

logger = structlog.get_logger(__name__)


def occ_available() -> bool:
    """Return True when the OCP imports succeeded."""
    return _OCC_IMPORT_ERROR is None


def require_occ() -> None:
    """Raise a descriptive error if OCP is not installed."""
    if _OCC_IMPORT_ERROR is None:
        return
    raise KernelUnavailableError(
        f"OCP could not be imported ({_OCC_IMPORT_ERROR}). Install cadquery-ocp."
    ) from _OCC_IMPORT_ERROR


def _pnt(p: Vec3) -> "gp_Pnt":
    return gp_Pnt(p[0], p[1], p[2])


def _native(shape: Shape, *kinds: ShapeKind):
    if kinds and shape.kind not in kinds:
        raise KernelOperationError(
            "unwrap", f"expected {'/'.join(k.value for k in kinds)}, got {shape.kind.value}"
        )
    return shape.native


class OccTriangulation:
    """`FaceTriangulation` view over a Poly_Triangulation."""

    def __init__(self, triangulation, location, reversed_: bool) -> None:
        self._tri = triangulation
        self._trsf = location.Transformation()
        self._reversed = reversed_

    @property
    def node_count(self) -> int:
        return self._tri.NbNodes()

    @property
    def triangle_count(self) -> int:
        return self._tri.NbTriangles()

    @property
    def is_reversed(self) -> bool:
        return self._reversed

    def has_normals(self) -> bool:
        return bool(self._tri.HasNormals())

    def compute_normals(self) -> None:
        self._tri.ComputeNormals()

    def node(self, index: int) -> Vec3:
        p = self._tri.Node(index).Transformed(self._trsf)
        return (p.X(), p.Y(), p.Z())

    def normal(self, index: int) -> Vec3:
        n = self._tri.Normal(index).Transformed(self._trsf)
        return (n.X(), n.Y(), n.Z())

    def triangle(self, index: int) -> tuple[int, int, int]:
        t = self._tri.Triangle(index)
        return (t.Value(1), t.Value(2), t.Value(3))


class OccKernel:
    """`Kernel` implementation over OpenCascade.

    Expensive to create only the first time OCP is imported; a process
    normally holds a single instance (see `mammaltag.core.service`).
    """

    def __init__(self, run_parallel: bool = False) -> None:
        require_occ()
        self._run_parallel = run_parallel

    # -- primitives and booleans ---------------------------------------

    def make_box(self, dx: float, dy: float, dz: float, origin: Vec3 = (0.0, 0.0, 0.0)) -> Shape:
        return Shape(ShapeKind.SOLID, BRepPrimAPI_MakeBox(_pnt(origin), dx, dy, dz).Shape())

    def make_sphere(self, center: Vec3, radius: float) -> Shape:
        return Shape(ShapeKind.SOLID, BRepPrimAPI_MakeSphere(_pnt(center), radius).Shape())

    def fuse(self, a: Shape, b: Shape) -> Shape:
        return self._boolean("fuse", BRepAlgoAPI_Fuse(), a, b)

    def cut(self, body: Shape, tool: Shape) -> Shape:
        return self._boolean("cut", BRepAlgoAPI_Cut(), body, tool)

    def _boolean(self, name: str, op, a: Shape, b: Shape) -> Shape:
        arguments = TopTools_ListOfShape()
        arguments.Append(a.native)
        tools = TopTools_ListOfShape()
        tools.Append(b.native)

        op.SetArguments(arguments)
        op.SetTools(tools)
        op.SetRunParallel(self._run_parallel)
        try:
            op.Build(Message_ProgressRange())
        except Exception as e:  # Standard_Failure surfaces as a Python exception
            raise BooleanOperationError(name, str(e)) from e

        if not op.IsDone():
            raise BooleanOperationError(name, "kernel reported errors")

        result = op.Shape()
        if result.IsNull():
            raise BooleanOperationError(name, "result shape is null")

        return Shape(ShapeKind.SOLID, result)

    # -- planar topology ------------------------------------------------

    def make_edge(self, start: Vec3, end: Vec3) -> Shape:
        builder = BRepBuilderAPI_MakeEdge(_pnt(start), _pnt(end))
        if not builder.IsDone():
            raise KernelOperationError("make_edge", f"degenerate segment {start} -> {end}")
        return Shape(ShapeKind.EDGE, builder.Edge())

    def make_wire(self, edges: Sequence[Shape]) -> Shape:
        builder = BRepBuilderAPI_MakeWire()
        for edge in edges:
            builder.Add(_native(edge, ShapeKind.EDGE))
        if not builder.IsDone():
            raise KernelOperationError("make_wire", "edges do not form a connected wire")
        return Shape(ShapeKind.WIRE, builder.Wire())

    def make_face(self, outer: Shape, holes: Sequence[Shape] = ()) -> Shape:
        outer_wire = _native(outer, ShapeKind.WIRE)
        hole_wires = [_native(hole, ShapeKind.WIRE) for hole in holes]
        try:
            builder = BRepBuilderAPI_MakeFace(outer_wire, True)
            for wire in hole_wires:
                builder.Add(wire)
        except Exception as e:
            raise KernelOperationError("make_face", str(e)) from e
        if not builder.IsDone():
            raise KernelOperationError("make_face", "wire is not planar")

        # Inner wires must run against the outer one; let ShapeFix orient them
        fixer = ShapeFix_Face(builder.Face())
        try:
            fixer.FixOrientation()
            fixer.Perform()
        except Exception as e:
            raise KernelOperationError("make_face", str(e)) from e
        return Shape(ShapeKind.FACE, fixer.Face())

    def make_compound(self, shapes: Sequence[Shape]) -> Shape:
        compound = TopoDS_Compound()
        builder = BRep_Builder()
        builder.MakeCompound(compound)
        for shape in shapes:
            builder.Add(compound, shape.native)
        return Shape(ShapeKind.COMPOUND, compound)

    # -- solids ----------------------------------------------------------

    def extrude(self, shape: Shape, vector: Vec3) -> Shape:
        native = _native(shape, ShapeKind.FACE, ShapeKind.COMPOUND)
        try:
            prism = BRepPrimAPI_MakePrism(
                native, gp_Vec(vector[0], vector[1], vector[2]), False, True
            )
        except Exception as e:
            raise KernelOperationError("extrude", str(e)) from e
        if not prism.IsDone():
            raise KernelOperationError("extrude", f"prism along {vector} failed")
        return Shape(ShapeKind.SOLID, prism.Shape())

    def fillet_edges(self, solid: Shape, radius: float) -> Shape:
        native = _native(solid, ShapeKind.SOLID)
        fillet = BRepFilletAPI_MakeFillet(native)

        explorer = TopExp_Explorer(native, TopAbs_EDGE)
        while explorer.More():
            fillet.Add(radius, TopoDS.Edge_s(explorer.Current()))
            explorer.Next()

        try:
            fillet.Build()
        except Exception as e:  # OCCT raises Standard_Failure through the binding
            raise BooleanOperationError("fillet", str(e)) from e

        if not fillet.IsDone():
            raise BooleanOperationError("fillet", f"radius {radius} could not be applied")

        return Shape(ShapeKind.SOLID, fillet.Shape())

    def volume(self, solid: Shape) -> float:
        props = GProp_GProps()
        BRepGProp.VolumeProperties_s(solid.native, props)
        return abs(props.Mass())

    # -- triangulation ---------------------------------------------------

    def triangulate(self, solid: Shape, linear_deflection: float, angular_deflection: float) -> None:
        mesh = BRepMesh_IncrementalMesh(
            solid.native, linear_deflection, False, angular_deflection, self._run_parallel
        )
        mesh.Perform()

    def faces(self, solid: Shape) -> Iterator[Shape]:
        explorer = TopExp_Explorer(solid.native, TopAbs_FACE)
        while explorer.More():
            yield Shape(ShapeKind.FACE, TopoDS.Face_s(explorer.Current()))
            explorer.Next()

    def face_triangulation(self, face: Shape) -> OccTriangulation | None:
        native = _native(face, ShapeKind.FACE)
        location = TopLoc_Location()
        triangulation = BRep_Tool.Triangulation_s(native, location)
        if triangulation is None:
            return None
        return OccTriangulation(
            triangulation,
            location,
            native.Orientation() == TopAbs_REVERSED,
        )

    # -- export ----------------------------------------------------------

    def write(self, solid: Shape, fmt: ExportFormat) -> bytes:
        """Encode the solid; the shape must already be triangulated."""
        tmp = tempfile.NamedTemporaryFile(delete=False, suffix=fmt.extension)
        tmp.close()
        try:
            if fmt is ExportFormat.STL:
                self._write_stl(solid, tmp.name)
            elif fmt is ExportFormat.GLB:
                self._write_glb(solid, tmp.name)
            else:
                raise ExportError(fmt.value, "unsupported format")

            with open(tmp.name, "rb") as handle:
                data = handle.read()
        finally:
            os.remove(tmp.name)

        if not data:
            raise ExportError(fmt.value, "writer produced an empty file")

        logger.debug("Solid exported", format=fmt.value, size=len(data))
        return data

    def _write_stl(self, solid: Shape, path: str) -> None:
        writer = StlAPI_Writer()
        writer.ASCIIMode = False
        if not writer.Write(solid.native, path):
            raise ExportError("stl", "StlAPI_Writer reported failure")

    def _write_glb(self, solid: Shape, path: str) -> None:
        app = XCAFApp_Application.GetApplication_s()
        doc = TDocStd_Document(TCollection_ExtendedString("XmlOcaf"))
        app.InitDocument(doc)

        shape_tool = XCAFDoc_DocumentTool.ShapeTool_s(doc.Main())
        shape_tool.AddShape(solid.native, False)

        writer = RWGltf_CafWriter(TCollection_AsciiString(path), True)
        ok = writer.Perform(doc, TColStd_IndexedDataMapOfStringString(), Message_ProgressRange())
        if not ok:
            raise ExportError("glb", "RWGltf_CafWriter reported failure")
