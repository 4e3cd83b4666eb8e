# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for the manifest to invocation compiler.
"""
import json
import pytest

from pocketdim.BUILDERS.invocation_compiler import InvocationCompiler, encode_payload
from pocketdim.errors import PayloadEncodingFailed, SelfPathUnavailable
from pocketdim.MODELS.manifest import InitSpec, Manifest, MountSpec, ShareSpec
from pocketdim.UTILS.identity import HostIdentity

SELF_PATH = "/opt/pocketdim/bin/pocketdim"
IDENTITY = HostIdentity(username="dev", uid=1000, gid=1001)


@pytest.fixture
def compiler():
    return InvocationCompiler(identity=IDENTITY, self_path_resolver=lambda: SELF_PATH)


@pytest.fixture
def manifest():
    return Manifest(
        name="c-devel-t",
        image="docker.io/library/fedora:latest",
        additional_args=["--replace"],
        init=InitSpec(
            pre_init=["echo start"],
            init=["echo done", "touch /ready"],
            packages=["gcc", "make"],
        ),
        share=ShareSpec(
            net="host",
            sec=["label=disable"],
            mounts=[MountSpec(ty="bind", src="/home/dev/src", dst="/src", opts=["ro"])],
        ),
    )


def test_full_invocation(compiler, manifest):
    """The invocation is reproduced in exact order."""
    assert compiler.compile(manifest) == [
        "podman", "create",
        "--replace",
        "--hostname", "c-devel-t",
        "--name", "c-devel-t",
        "--label", "manager=pocket-dimension",
        "--user", "root:root",
        "--network", "host",
        "--ipc", '""',
        "--security-opt", "label=disable",
        "--mount", "type=bind,src=/home/dev/src,dst=/src,ro",
        "--mount", f"type=bind,source={SELF_PATH},dst=/usr/bin/entrypoint,ro=true",
        "--entrypoint", "/usr/bin/entrypoint",
        "docker.io/library/fedora:latest",
        "--username", "dev",
        "--uid", "1000",
        "--gid", "1001",
        "--pre-init", '["echo start"]',
        "--init", '["echo done","touch /ready"]',
        "--packages", '["gcc","make"]',
    ]


def test_minimal_manifest(compiler):
    """A bare manifest still gets both mode flags and the entrypoint."""
    args = compiler.compile(Manifest(name="bare", image="alpine"))
    assert args[args.index("--network") + 1] == '""'
    assert args[args.index("--ipc") + 1] == '""'
    assert "--security-opt" not in args
    assert args.count("--mount") == 1
    assert args[-6:] == ["--pre-init", "[]", "--init", "[]", "--packages", "[]"]


def test_additional_args_follow_create(compiler, manifest):
    manifest = manifest.model_copy(update={"additional_args": ["--pull", "never"]})
    args = compiler.compile(manifest)
    assert args[:4] == ["podman", "create", "--pull", "never"]


def test_single_entrypoint_injection(compiler, manifest):
    args = compiler.compile(manifest)
    injected = [
        args[i + 1] for i, arg in enumerate(args)
        if arg == "--mount" and f"source={SELF_PATH}" in args[i + 1]
    ]
    assert injected == [f"type=bind,source={SELF_PATH},dst=/usr/bin/entrypoint,ro=true"]
    assert args.count("--entrypoint") == 1
    assert args[args.index("--entrypoint") + 1] == "/usr/bin/entrypoint"


def test_payloads_round_trip(compiler, manifest):
    """Each payload decodes back to its original sequence."""
    args = compiler.compile(manifest)
    for flag, expected in [
        ("--pre-init", manifest.init.pre_init),
        ("--init", manifest.init.init),
        ("--packages", manifest.init.packages),
    ]:
        encoded = args[args.index(flag) + 1]
        assert json.loads(encoded) == expected
        assert encode_payload(flag, json.loads(encoded)) == encoded


def test_payload_keeps_quotes_and_unicode(compiler):
    manifest = Manifest(
        name="q", image="alpine",
        init=InitSpec(init=['echo "héllo" > /etc/motd']),
    )
    args = compiler.compile(manifest)
    encoded = args[args.index("--init") + 1]
    assert json.loads(encoded) == ['echo "héllo" > /etc/motd']


def test_no_package_command(compiler, manifest):
    assert "--package-command" not in compiler.compile(manifest)


def test_package_command_verbatim(compiler, manifest):
    init = manifest.init.model_copy(update={"package_command": "xbps-install -y %packages%"})
    manifest = manifest.model_copy(update={"init": init})
    args = compiler.compile(manifest)
    assert args[-2:] == ["--package-command", "xbps-install -y %packages%"]


def test_compile_is_deterministic(compiler, manifest):
    assert compiler.compile(manifest) == compiler.compile(manifest)


def test_self_path_unavailable(manifest):
    def unavailable():
        raise SelfPathUnavailable("/proc/self/exe", "Permission denied")

    compiler = InvocationCompiler(identity=IDENTITY, self_path_resolver=unavailable)
    with pytest.raises(SelfPathUnavailable):
        compiler.compile(manifest)


def test_encode_payload_failure():
    with pytest.raises(PayloadEncodingFailed) as exc:
        encode_payload("packages", [object()])
    assert exc.value.field == "packages"


def test_identity_read_from_process(monkeypatch, manifest):
    """Without an explicit identity the running process is asked."""
    monkeypatch.setattr(
        HostIdentity, "current", classmethod(lambda cls: HostIdentity("someone", 42, 43))
    )
    args = InvocationCompiler(self_path_resolver=lambda: SELF_PATH).compile(manifest)
    assert args[args.index("--username") + 1] == "someone"
    assert args[args.index("--uid") + 1] == "42"
    assert args[args.index("--gid") + 1] == "43"
