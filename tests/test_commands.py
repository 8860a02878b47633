import pytest

from docdeploy.commands import (
    build_commands,
    deploy_commands,
    prepare_build_commands,
    prepare_commands,
    stage_specific_next_gen_commands,
)
from docdeploy.errors import InvalidJobError
from docdeploy.variants import PRODUCTION, STAGING


def test_classic_production_deploy_commands(make_job):
    cmds = deploy_commands(make_job().payload, PRODUCTION)
    assert cmds == (
        ". /venv/bin/activate",
        "cd repos/docs-guides",
        "make publish && make deploy",
    )


def test_next_gen_without_manifest_prefix(make_job):
    payload = make_job(isNextGen=True, mutPrefix="abc").payload
    cmds = deploy_commands(payload, PRODUCTION, "-g")
    assert cmds[-1] == "make next-gen-deploy MUT_PREFIX=abc"


def test_next_gen_with_manifest_prefix_and_stable_branch(make_job):
    payload = make_job(isNextGen=True, mutPrefix="abc", manifestPrefix="m").payload
    cmds = deploy_commands(payload, PRODUCTION, "-g")
    assert cmds[-1] == "make next-gen-deploy MUT_PREFIX=abc MANIFEST_PREFIX=m GLOBAL_SEARCH_FLAG=-g"


def test_next_gen_with_manifest_prefix_not_stable(make_job):
    payload = make_job(isNextGen=True, mutPrefix="abc", manifestPrefix="m").payload
    cmds = deploy_commands(payload, PRODUCTION, "")
    assert cmds[-1] == "make next-gen-deploy MUT_PREFIX=abc MANIFEST_PREFIX=m GLOBAL_SEARCH_FLAG="


def test_next_gen_requires_mut_prefix(make_job):
    with pytest.raises(InvalidJobError):
        deploy_commands(make_job(isNextGen=True).payload, PRODUCTION)


def test_staging_commands(make_job):
    assert deploy_commands(make_job().payload, STAGING)[-1] == "make stage"
    payload = make_job(isNextGen=True, mutPrefix="abc").payload
    assert deploy_commands(payload, STAGING)[-1] == "make next-gen-stage MUT_PREFIX=abc"


def test_builder_is_pure(make_job):
    payload = make_job(isNextGen=True, mutPrefix="abc", manifestPrefix="m").payload
    assert deploy_commands(payload, PRODUCTION, "-g") == deploy_commands(payload, PRODUCTION, "-g")


def test_prepare_commands_rebuilds_per_job(make_job):
    first = prepare_commands(make_job(), PRODUCTION)
    again = prepare_commands(first, PRODUCTION)
    assert len(again.deploy_commands) == 3
    assert first.deploy_commands == again.deploy_commands


def test_build_and_stage_specific_next_gen_commands(make_job):
    payload = make_job().payload
    assert build_commands(payload)[-1] == "make html"
    assert stage_specific_next_gen_commands(payload) == (
        ". /venv/bin/activate",
        "cd repos/docs-guides",
        "rm -f makefile",
        "make get-build-dependencies",
        "make next-gen-html",
    )


def test_prepare_build_commands_picks_flavor(make_job):
    assert prepare_build_commands(make_job()).build_commands[-1] == "make html"
    nextgen = make_job(isNextGen=True, mutPrefix="abc")
    assert prepare_build_commands(nextgen).build_commands[-1] == "make next-gen-html"
